from datetime import date, timedelta


def previous_year_window(today: date) -> tuple[date, date]:
    """One full year of days ending yesterday, both ends inclusive."""
    end = today - timedelta(days=1)
    return _minus_one_year(end) + timedelta(days=1), end


def _minus_one_year(day: date) -> date:
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        # 29 February
        return day.replace(year=day.year - 1, day=28)
