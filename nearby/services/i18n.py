TRANSLATIONS = {
    "en": {
        "traffic_none": "no traffic data",
        "traffic_low": "not very busy",
        "traffic_moderate": "generally busy",
        "traffic_high": "very busy",
        "traffic_extreme": "extremely busy",
        "season_summer": "Summer",
        "season_autumn": "Autumn",
        "season_winter": "Winter",
        "season_spring": "Spring",
        "unknown": "Unknown",
    },
    "pt": {
        "traffic_none": "Sem dados de tráfego",
        "traffic_low": "Área não muito movimentada",
        "traffic_moderate": "Área geralmente movimentada",
        "traffic_high": "Área muito movimentada",
        "traffic_extreme": "Área extremamente movimentada",
        "season_summer": "Verão",
        "season_autumn": "Outono",
        "season_winter": "Inverno",
        "season_spring": "Primavera",
        "unknown": "Desconhecido",
    },
}


def get_translations(lang: str = "en") -> dict:
    # Basic fallback
    if lang not in TRANSLATIONS:
        lang = "en"
    return TRANSLATIONS[lang]


def label(key: str, lang: str = "en") -> str:
    return get_translations(lang)[key]
