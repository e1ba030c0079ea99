from fastapi import APIRouter

router = APIRouter()

# Sample week shown on the dashboard until intake tracking is wired in
WEEKLY_CALORIES = [
    {"day": "Monday", "calories": 2150},
    {"day": "Tuesday", "calories": 1980},
    {"day": "Wednesday", "calories": 2340},
    {"day": "Thursday", "calories": 2100},
    {"day": "Friday", "calories": 2450},
    {"day": "Saturday", "calories": 2680},
    {"day": "Sunday", "calories": 2200},
]


def average_calories(series) -> int:
    if not series:
        return 0
    return round(sum(point["calories"] for point in series) / len(series))


@router.get("/weekly-calories")
async def weekly_calories():
    return {
        "title": "Weekly Calories Chart",
        "description": "Daily calorie intake for this week",
        "data": [{**point, "label": point["day"][:3]} for point in WEEKLY_CALORIES],
        "averageCalories": average_calories(WEEKLY_CALORIES),
    }
