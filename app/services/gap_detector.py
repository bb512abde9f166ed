# app/services/gap_detector.py
from datetime import date, timedelta
from typing import Iterable, List


def find_missing_dates(start: date, end: date, existing_dates: Iterable[date]) -> List[str]:
    """
    [start, end] 구간(양끝 포함)에서 WorkLog가 없는 날짜를 "YYYY-MM-DD" 문자열로, 오름차순 반환.
    start > end 이면 빈 리스트.
    """
    existing = {d.isoformat() for d in existing_dates}

    missing: List[str] = []
    day = start
    while day <= end:
        key = day.isoformat()
        if key not in existing:
            missing.append(key)
        day += timedelta(days=1)
    return missing
