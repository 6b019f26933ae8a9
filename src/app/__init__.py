"""
App layer: HTTP 서버 (FastAPI).

역할:
- 목록/상세/업로드 페이지, 이미지/스타일시트 응답
- multipart 업로드 파싱
- ⚠️ 파일 저장 로직 없음 (core에 위임)

주의: 폴더 구분
- src/templates/ → 코드 (renderer.py)
- templates/ (루트) → HTML 원본
"""
