"""
실행 중인 서버에 대한 제출 흐름 확인
헬스체크 → 제출 생성 → 조회 → 상태 변경(processing → completed)
"""
import sys

import httpx

BASE_URL = "http://localhost:3000/api/v1"


def check_flow(base_url: str = BASE_URL) -> bool:
    print("=" * 80)
    print("제출 흐름 확인")
    print("=" * 80)

    with httpx.Client(base_url=base_url, timeout=10) as client:
        # 1. 헬스체크
        print("\n[1] 헬스체크")
        try:
            response = client.get("/health")
        except httpx.ConnectError as e:
            print(f"   ❌ 서버 연결 실패: {str(e)}")
            return False
        print(f"   Status: {response.status_code}, body: {response.json()}")

        # 2. 제출 생성
        print("\n[2] 제출 생성")
        response = client.post(
            "/submissions",
            json={"problemId": "two-sum", "lang": "cpp", "code": "int main(){}"},
        )
        if response.status_code != 201:
            print(f"   ❌ 제출 생성 실패: {response.status_code} {response.text[:200]}")
            return False
        submission_id = response.json()["id"]
        print(f"   ✅ 제출 생성 - id: {submission_id}, status: {response.json()['status']}")

        # 3. 조회
        print("\n[3] 제출 조회")
        response = client.get(f"/submissions/{submission_id}")
        print(f"   Status: {response.status_code}, status: {response.json().get('status')}")

        # 4. 채점 워커 콜백 흉내
        print("\n[4] 상태 변경")
        for body in (
            {"status": "processing"},
            {
                "status": "completed",
                "result": {"verdict": "ACCEPTED", "testCasesPassed": 15, "totalTestCases": 15},
            },
        ):
            response = client.patch(f"/submissions/{submission_id}", json=body)
            print(f"   {body['status']}: {response.status_code} {response.json()}")
            if response.status_code != 200:
                return False

    print("\n✅ 제출 흐름 확인 완료")
    return True


if __name__ == "__main__":
    sys.exit(0 if check_flow(*sys.argv[1:2]) else 1)
