"""
검색 인덱스 동기화 패키지

저장소의 components/users/collections 변경을 호스팅 검색 인덱스에 반영합니다.

- changes: 세션 단위 변경 수집 (커밋된 변경만 발행)
- projections: 저장소 문서 → 검색 객체 변환
- client: Algolia 호환 REST 클라이언트 (httpx)
- synchronizer: 생성/수정/삭제 핸들러와 전체 재동기화
- publishers: 변경 전달 방식 (Celery, inline, disabled)
"""
