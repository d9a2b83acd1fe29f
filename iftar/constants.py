"""Static data: popular cities, method descriptions, Ramadan dates, themes."""

import datetime

from iftar.models import CalculationMethod, City, TimePhase

POPULAR_CITIES = (
    City("Houston", "USA", 29.7604, -95.3698, "America/Chicago"),
    City("New York", "USA", 40.7128, -74.0060, "America/New_York"),
    City("London", "UK", 51.5074, -0.1278, "Europe/London"),
    City("Dubai", "UAE", 25.2048, 55.2708, "Asia/Dubai"),
    City("Jakarta", "Indonesia", -6.2088, 106.8456, "Asia/Jakarta"),
    City("Riyadh", "Saudi Arabia", 24.7136, 46.6753, "Asia/Riyadh"),
    City("Istanbul", "Turkey", 41.0082, 28.9784, "Europe/Istanbul"),
    City("Cairo", "Egypt", 30.0444, 31.2357, "Africa/Cairo"),
    City("Kuala Lumpur", "Malaysia", 3.1390, 101.6869, "Asia/Kuala_Lumpur"),
    City("Toronto", "Canada", 43.6532, -79.3832, "America/Toronto"),
    City("Los Angeles", "USA", 34.0522, -118.2437, "America/Los_Angeles"),
    City("Mecca", "Saudi Arabia", 21.4225, 39.8262, "Asia/Riyadh"),
)

CALCULATION_METHODS = {
    CalculationMethod.ISNA: ("Islamic Society of North America", "Common in US/Canada"),
    CalculationMethod.MUSLIM_WORLD_LEAGUE: ("Muslim World League", "Widely used internationally"),
    CalculationMethod.EGYPTIAN: ("Egyptian General Authority", "Used in Egypt and Africa"),
    CalculationMethod.UMM_AL_QURA: ("Umm al-Qura University", "Used in Saudi Arabia"),
    CalculationMethod.KARACHI: ("University of Islamic Sciences, Karachi", "Common in Pakistan"),
}

# Approximate; the actual dates depend on moon sighting.
RAMADAN_2026 = {
    "start": datetime.date(2026, 2, 18),
    "end": datetime.date(2026, 3, 19),
    "hijri_year": 1447,
}

STORAGE_KEYS = {
    "location": "iftar-location",
    "method": "iftar-calc-method",
}

TIME_PHASE_THEMES = {
    TimePhase.MORNING: {
        "bg": "#F5F1E8",
        "text": "#2C2C2C",
        "text_muted": "#6B6B6B",
        "accent": "#D4AF37",
        "description": "Morning light, fresh start",
    },
    TimePhase.AFTERNOON: {
        "bg": "#E8EDF2",
        "text": "#1A365D",
        "text_muted": "#5F7290",
        "accent": "#0D7377",
        "description": "The longest part of the fast, calm endurance",
    },
    TimePhase.PRE_IFTAR: {
        "bg": "#FFE4D6",
        "text": "#4A2C2A",
        "text_muted": "#806563",
        "accent": "#E86A33",
        "description": "Sunset approaching, anticipation building",
    },
    TimePhase.NEAR_IFTAR: {
        "bg": "#2D1B69",
        "text": "#FFFFFF",
        "text_muted": "#C0BAD2",
        "accent": "#FFD700",
        "description": "Twilight, almost there",
    },
    TimePhase.AFTER_IFTAR: {
        "bg": "#0F1419",
        "text": "#F0F0F0",
        "text_muted": "#A8A9AA",
        "accent": "#4ECDC4",
        "description": "Night prayer, peaceful reflection",
    },
    TimePhase.LATE_NIGHT: {
        "bg": "#0A0E14",
        "text": "#D0D0D0",
        "text_muted": "#93959A",
        "accent": "#A78BFA",
        "description": "Deep night, tahajjud time",
    },
}
