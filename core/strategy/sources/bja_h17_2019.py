"""Blackjack Apprenticeship H17 deviation chart (2019)."""

from core.strategy.chart import StrategyChart, load_chart

BJA_H17_2019_DATA = {
    "metadata": {
        "id": "bja-h17-2019",
        "provider": "Blackjack Apprenticeship",
        "chart_name": "H17 Deviation Chart",
        "source_url": "https://www.blackjackapprenticeship.com/wp-content/uploads/2019/07/BJA_H17.pdf",
        "pdf_md5": "de7471c5d1e232bf85e790b8a83ff9e9",
        "retrieved_at": "2026-02-25",
        "notes": [
            "Canonical strategy data source for the trainer.",
            "Insurance plus Illustrious 18 and Fab 4 index plays.",
        ],
    },
    "insurance": {"tc_threshold": 3, "comparison": "gte"},
    # Illustrious 18 (insurance is listed separately above), most valuable first
    "deviations": [
        {"name": "16 vs 10: Stand", "player_total": 16, "dealer_upcard": 10,
         "basic_action": "hit", "deviation_action": "stand", "tc_threshold": 0},
        {"name": "15 vs 10: Stand", "player_total": 15, "dealer_upcard": 10,
         "basic_action": "hit", "deviation_action": "stand", "tc_threshold": 4},
        {"name": "20 vs 5: Split", "player_total": 20, "is_pair": True, "dealer_upcard": 5,
         "basic_action": "stand", "deviation_action": "split", "tc_threshold": 5},
        {"name": "20 vs 6: Split", "player_total": 20, "is_pair": True, "dealer_upcard": 6,
         "basic_action": "stand", "deviation_action": "split", "tc_threshold": 4},
        {"name": "10 vs 10: Double", "player_total": 10, "dealer_upcard": 10,
         "basic_action": "hit", "deviation_action": "double", "tc_threshold": 4},
        {"name": "12 vs 3: Stand", "player_total": 12, "dealer_upcard": 3,
         "basic_action": "hit", "deviation_action": "stand", "tc_threshold": 2},
        {"name": "12 vs 2: Stand", "player_total": 12, "dealer_upcard": 2,
         "basic_action": "hit", "deviation_action": "stand", "tc_threshold": 3},
        {"name": "11 vs A: Double", "player_total": 11, "dealer_upcard": 11,
         "basic_action": "hit", "deviation_action": "double", "tc_threshold": 1},
        {"name": "9 vs 2: Double", "player_total": 9, "dealer_upcard": 2,
         "basic_action": "hit", "deviation_action": "double", "tc_threshold": 1},
        {"name": "10 vs A: Double", "player_total": 10, "dealer_upcard": 11,
         "basic_action": "hit", "deviation_action": "double", "tc_threshold": 4},
        {"name": "9 vs 7: Double", "player_total": 9, "dealer_upcard": 7,
         "basic_action": "hit", "deviation_action": "double", "tc_threshold": 3},
        {"name": "16 vs 9: Stand", "player_total": 16, "dealer_upcard": 9,
         "basic_action": "hit", "deviation_action": "stand", "tc_threshold": 5},
        {"name": "13 vs 2: Hit", "player_total": 13, "dealer_upcard": 2,
         "basic_action": "stand", "deviation_action": "hit", "tc_threshold": -1},
        {"name": "12 vs 4: Hit", "player_total": 12, "dealer_upcard": 4,
         "basic_action": "stand", "deviation_action": "hit", "tc_threshold": 0,
         "comparison": "lte"},
        {"name": "12 vs 5: Hit", "player_total": 12, "dealer_upcard": 5,
         "basic_action": "stand", "deviation_action": "hit", "tc_threshold": -2},
        {"name": "12 vs 6: Hit", "player_total": 12, "dealer_upcard": 6,
         "basic_action": "stand", "deviation_action": "hit", "tc_threshold": -1},
        {"name": "13 vs 3: Hit", "player_total": 13, "dealer_upcard": 3,
         "basic_action": "stand", "deviation_action": "hit", "tc_threshold": -2},
        # Fab 4 surrenders
        {"name": "14 vs 10: Surrender", "player_total": 14, "dealer_upcard": 10, "group": "Fab4",
         "basic_action": "hit", "deviation_action": "surrender", "tc_threshold": 3},
        {"name": "15 vs 10: Surrender", "player_total": 15, "dealer_upcard": 10, "group": "Fab4",
         "basic_action": "hit", "deviation_action": "surrender", "tc_threshold": 0},
        {"name": "15 vs 9: Surrender", "player_total": 15, "dealer_upcard": 9, "group": "Fab4",
         "basic_action": "hit", "deviation_action": "surrender", "tc_threshold": 2},
        {"name": "15 vs A: Surrender", "player_total": 15, "dealer_upcard": 11, "group": "Fab4",
         "basic_action": "hit", "deviation_action": "surrender", "tc_threshold": 1},
    ],
}

BJA_H17_2019: StrategyChart = load_chart(BJA_H17_2019_DATA)
