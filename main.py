"""Simple entrypoint to run the outfit recommender locally."""

import json

from evaluation.scenarios import COLD_FORMAL, HOT_CASUAL
from stylist_app.app import StylistApp


def main() -> None:
    app = StylistApp()
    for scenario in (COLD_FORMAL, HOT_CASUAL):
        response = app.recommend(
            {
                "inventory": scenario.wardrobe_items,
                "profile": scenario.profile,
                "context": scenario.context,
                "include_accessories": scenario.include_accessories,
            }
        )
        for outfit in response.get("recommendations", []):
            print(json.dumps({"id": outfit["id"], "confidence": round(outfit["confidence"], 3), "description": outfit["description"]}))


if __name__ == "__main__":
    main()
