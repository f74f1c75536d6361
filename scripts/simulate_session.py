# scripts/simulate_session.py
import random
import sys
import time

import requests

BASE_URL = "http://localhost:8000"

STATEMENTS = [
    "毎日20分、週3回英語を勉強したい。TOEIC800点を目指す。",
    "仕事が忙しくて運動が続かない。体重を5kg減らしたい。",
    "毎月3万円貯金したいが、家計簿アプリは三日坊主。",
    "朝の読書習慣を続けている。記録は毎週振り返っている。",
    "家族ともっと話す時間を作りたい。",
    "資格試験まで3ヶ月。過去問を1日1時間解く予定。",
    "何から始めればいいかわからない。",
]


def run_simulation(n=30):
    print(f"Posting {n} statements to {BASE_URL}/analyze ...")

    for i in range(n):
        payload = {
            "text": random.choice(STATEMENTS),
            "category": random.choice(["auto", "auto", "auto", "study", "health"]),
        }
        try:
            res = requests.post(f"{BASE_URL}/analyze", json=payload, timeout=10)
        except requests.RequestException as e:
            print(f"Connection Error: {e}")
            break

        if res.status_code == 201:
            data = res.json()
            print(f"[{i+1}/{n}] {data['line_label']} | score {data['scores']['overall']:>3} "
                  f"| delay {data['delays']['overall']:>3}分 | {data['status_level']}")
        else:
            print(f"[{i+1}/{n}] Error: {res.status_code}")

        time.sleep(0.05)

    print("Simulation complete.")


if __name__ == "__main__":
    try:
        requests.get(f"{BASE_URL}/", timeout=5)
    except requests.RequestException:
        print("Server not running!")
        sys.exit(1)

    run_simulation()
