"""
scripts/generate_diet.py
────────────────────────────────────────────────────────────────────────
Command-line client for the generation flow:

    python -m scripts.generate_diet --days 3 --calories 2200 --meals 2 \
        --cuisine polish --approve

Resume polling a generation that was started elsewhere (e.g. after the
terminal was closed):

    python -m scripts.generate_diet --generation-id 42 --approve

The API token is read from --token or the DIET_API_TOKEN env var.
"""
from __future__ import annotations

import asyncio
import json
import os
import sys
from argparse import ArgumentParser, Namespace
from typing import Any, Dict

from dotenv import load_dotenv
load_dotenv()

import httpx

from core.models.enums import CuisineType
from core.poller import MAX_POLLING_TIME, POLLING_INTERVAL, GenerationPoller, PollingError


def _progress(pct: int) -> None:
    bar = "#" * (pct // 5)
    print(f"\r  [{bar:<20}] {pct:3d}%", end="", flush=True)


async def _run(args: Namespace) -> int:
    headers = {"Authorization": f"Bearer {args.token}"}
    async with httpx.AsyncClient(base_url=args.base_url, headers=headers, timeout=180) as http:

        async def fetch(generation_id: int) -> Dict[str, Any]:
            r = await http.get(f"/api/v1/generations/{generation_id}")
            r.raise_for_status()
            return r.json()

        generation_id = args.generation_id
        if generation_id is None:
            r = await http.post(
                "/api/v1/generations",
                json={
                    "number_of_days": args.days,
                    "calories_per_day": args.calories,
                    "meals_per_day": args.meals,
                    "preferred_cuisines": args.cuisine,
                },
            )
            r.raise_for_status()
            generation_id = r.json()["generation_id"]
            print(f"· generation {generation_id} submitted")

        poller = GenerationPoller(fetch, interval=args.interval, timeout=args.timeout)
        try:
            generation = await poller.wait(generation_id, on_progress=_progress)
        except PollingError as exc:
            print(f"\n! {exc}", file=sys.stderr)
            return 1
        print()

        preview = generation["preview"]
        for i, day in enumerate(preview["diet_plan"]):
            print(f"Day {i + 1}")
            for meal in day["meals"]:
                print(f"  - {meal['meal_type']}: {meal['name']} ({meal['calories']} kcal)")
        print(f"Shopping list: {len(preview['shopping_list'])} item(s)")

        if args.approve:
            r = await http.post(f"/api/v1/generations/{generation_id}/approve")
            r.raise_for_status()
            diet = r.json()
            print(f"✔ diet {diet['id']} is {diet['status']}")
        elif args.json:
            print(json.dumps(preview, indent=2))
    return 0


def main() -> None:
    ap = ArgumentParser(description=__doc__.split("\n\n")[0])
    ap.add_argument("--base-url", default=os.getenv("DIET_API_URL", "http://127.0.0.1:8000"))
    ap.add_argument("--token", default=os.getenv("DIET_API_TOKEN", ""))
    ap.add_argument("--generation-id", type=int, help="poll an existing generation")
    ap.add_argument("--days", type=int, default=7)
    ap.add_argument("--calories", type=int, default=2000)
    ap.add_argument("--meals", type=int, default=3)
    ap.add_argument(
        "--cuisine", action="append", default=[], choices=[c.value for c in CuisineType]
    )
    ap.add_argument("--interval", type=float, default=POLLING_INTERVAL)
    ap.add_argument("--timeout", type=float, default=MAX_POLLING_TIME)
    ap.add_argument("--approve", action="store_true", help="materialise the diet when done")
    ap.add_argument("--json", action="store_true", help="dump the raw preview")
    args = ap.parse_args()

    if not args.token:
        raise SystemExit("no API token – pass --token or set DIET_API_TOKEN")
    raise SystemExit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
