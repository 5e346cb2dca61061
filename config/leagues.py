"""League configurations for all supported competitions."""

LEAGUE_CONFIG = {
    # England
    "premier_league": {
        "country": "England",
        "display_name": "Premier League",
        "priority": 1,
        "odds_api_key": "soccer_epl",
    },
    "championship": {
        "country": "England",
        "display_name": "Championship",
        "priority": 2,
        "odds_api_key": "soccer_efl_champ",
    },

    # Germany
    "bundesliga": {
        "country": "Germany",
        "display_name": "Bundesliga",
        "priority": 1,
        "odds_api_key": "soccer_germany_bundesliga",
    },
    "2_bundesliga": {
        "country": "Germany",
        "display_name": "2. Bundesliga",
        "priority": 2,
        "odds_api_key": "soccer_germany_bundesliga2",
    },

    # Spain
    "la_liga": {
        "country": "Spain",
        "display_name": "La Liga",
        "priority": 1,
        "odds_api_key": "soccer_spain_la_liga",
    },

    # Italy
    "serie_a": {
        "country": "Italy",
        "display_name": "Serie A",
        "priority": 1,
        "odds_api_key": "soccer_italy_serie_a",
    },

    # France
    "ligue_1": {
        "country": "France",
        "display_name": "Ligue 1",
        "priority": 1,
        "odds_api_key": "soccer_france_ligue_one",
    },

    # Netherlands
    "eredivisie": {
        "country": "Netherlands",
        "display_name": "Eredivisie",
        "priority": 2,
        "odds_api_key": "soccer_netherlands_eredivisie",
    },

    # Portugal
    "primeira_liga": {
        "country": "Portugal",
        "display_name": "Primeira Liga",
        "priority": 2,
        "odds_api_key": "soccer_portugal_primeira_liga",
    },

    # Kenya
    "kenyan_premier_league": {
        "country": "Kenya",
        "display_name": "Kenyan Premier League",
        "priority": 3,
        "odds_api_key": None,
    },
}

def get_leagues_by_priority(min_priority: int = 1, max_priority: int = 2):
    """Get leagues filtered by priority."""
    return {
        key: config
        for key, config in LEAGUE_CONFIG.items()
        if min_priority <= config["priority"] <= max_priority
    }

def get_league_config(league_key: str):
    """Get configuration for a specific league."""
    return LEAGUE_CONFIG.get(league_key)
