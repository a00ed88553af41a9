# -*- coding: utf-8 -*-
"""
Rotation calendar configuration. Every policy change is a new row in
``rotation.policies``; the calculator itself never changes.
"""

CONFIG = {
    "rotation": {
        # 4-week cycle shared by every policy unless a policy carries its own "weeks"
        #   week 0: M1 Mon-Fri, free weekend
        #   week 1: M2 Mon-Fri, free weekend
        #   week 2: free Mon-Fri, full weekend
        #   week 3: afternoon Mon-Fri, free weekend
        "weeks": [
            {"weekday": "PRIMARY_MORNING", "weekend": "FREE"},
            {"weekday": "SECONDARY_MORNING", "weekend": "FREE"},
            {"weekday": "FREE", "weekend": "FULL"},
            {"weekday": "AFTERNOON", "weekend": "FREE"},
        ],
        # Ordered by effective_from. Before the first row every day is FREE.
        "policies": [
            {
                "name": "old",
                "effective_from": "2025-10-13",
                "anchor_monday": "2025-10-13",
                "cycle_phase_offset": 0,
            },
            {
                # restarted on week 2 (free / full weekend) from the Monday of Jan 5
                "name": "new",
                "effective_from": "2026-01-10",
                "anchor_monday": "2026-01-05",
                "cycle_phase_offset": 2,
            },
        ],
        # Special full days, applied regardless of the policy in force
        "overrides": [
            {"date": "2025-12-28", "label": "FULL", "note": "special full day"},
            {"date": "2026-01-02", "label": "FULL", "note": "special full day"},
        ],
    },

    # Month view
    "calendar": {
        "locale": "es",
        "timezone": "Europe/Madrid",
        "first_weekday": 0,  # Monday
    },
}
