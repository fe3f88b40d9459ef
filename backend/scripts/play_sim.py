#!/usr/bin/env python3
"""
Headless play simulation.

Plays seeded rounds through the spin controller and reports reach and
jackpot frequencies. Optionally writes one CSV row per round.

Usage:
    python -m scripts.play_sim --rounds 10000 --seed SHIPPO_2026
    python -m scripts.play_sim --rounds 10000 --order random --out out/rounds.csv
"""
import argparse
import csv
import hashlib
import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from shippo_slot.catalog_hash import get_catalog_hash
from shippo_slot.config import settings
from shippo_slot.logic.catalog import ReelCatalog, load_catalog
from shippo_slot.logic.controller import SpinController
from shippo_slot.logic.models import REEL_COUNT
from shippo_slot.logic.presenter import RecordingPresenter
from shippo_slot.logic.rng import SeededRNG


# Stop orders: master key, right-to-left, or shuffled per round
STOP_ORDERS = ("sequential", "reverse", "random")

CSV_FIELDS = [
    "round",
    "stop_order",
    "subject",
    "object",
    "verb",
    "reach",
    "outcome",
    "grade",
    "seed",
    "catalog_hash",
]


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    rounds: int = 0
    jackpots: int = 0
    reaches: int = 0
    reach_then_jackpot: int = 0
    jackpots_by_meaning: Counter = field(default_factory=Counter)
    rows: list[dict] = field(default_factory=list)

    @property
    def jackpot_rate(self) -> float:
        return self.jackpots / self.rounds if self.rounds else 0.0

    @property
    def reach_rate(self) -> float:
        return self.reaches / self.rounds if self.rounds else 0.0

    @property
    def reach_conversion(self) -> float:
        """Share of reaches that ended in a jackpot."""
        return self.reach_then_jackpot / self.reaches if self.reaches else 0.0


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)


def stop_sequence(order: str, order_rng: SeededRNG) -> list[int]:
    """Reel indices in the order they are stopped for one round."""
    if order == "sequential":
        return list(range(REEL_COUNT))
    if order == "reverse":
        return list(reversed(range(REEL_COUNT)))
    if order == "random":
        remaining = list(range(REEL_COUNT))
        sequence = []
        while remaining:
            sequence.append(remaining.pop(order_rng.randbelow(len(remaining))))
        return sequence
    raise ValueError(f"Unknown stop order: {order}")


def run_simulation(
    rounds: int,
    seed_str: str,
    order: str = "sequential",
    catalog: ReelCatalog | None = None,
    keep_rows: bool = False,
) -> SimulationStats:
    """
    Run headless simulation.

    Args:
        rounds: Number of rounds to play
        seed_str: Seed string for reproducibility
        order: 'sequential', 'reverse' or 'random' stop order
        catalog: Catalog to play (default: compiled-in)
        keep_rows: Keep one dict per round for CSV output

    Returns:
        SimulationStats with aggregated results
    """
    catalog = catalog or load_catalog()
    seed_int = seed_to_int(seed_str)
    # Landing draws and stop order use separate streams
    order_rng = SeededRNG(seed=seed_int + 1)
    recorder = RecordingPresenter()
    controller = SpinController(catalog, presenter=recorder, rng=SeededRNG(seed=seed_int))
    catalog_hash = get_catalog_hash(catalog)

    stats = SimulationStats()
    for n in range(rounds):
        recorder.clear()
        controller.start_round()
        sequence = stop_sequence(order, order_rng)
        for index in sequence:
            controller.stop_reel(index)

        state = controller.round_state
        outcome = state.outcome
        stats.rounds += 1
        if state.reach_triggered:
            stats.reaches += 1
        if outcome.is_jackpot:
            stats.jackpots += 1
            stats.jackpots_by_meaning[outcome.meaning] += 1
            if state.reach_triggered:
                stats.reach_then_jackpot += 1

        if keep_rows:
            landed = [item.spoken_form for item in state.landed_items()]
            stats.rows.append({
                "round": n,
                "stop_order": "-".join(str(i) for i in sequence),
                "subject": landed[0],
                "object": landed[1],
                "verb": landed[2],
                "reach": int(state.reach_triggered),
                "outcome": outcome.kind.value,
                "grade": outcome.grade or "",
                "seed": seed_str,
                "catalog_hash": catalog_hash,
            })

    return stats


def write_csv(stats: SimulationStats, output_path: str) -> None:
    """Write per-round rows to CSV."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        writer.writerows(stats.rows)


def main() -> int:
    parser = argparse.ArgumentParser(description="Headless Shippo Slot simulation")
    parser.add_argument("--rounds", type=int, default=10000, help="Rounds to play")
    parser.add_argument("--seed", default="SHIPPO_2026", help="Seed string")
    parser.add_argument(
        "--order",
        choices=STOP_ORDERS,
        default="sequential",
        help="Order in which reels are stopped",
    )
    parser.add_argument(
        "--catalog",
        default=settings.catalog_path,
        help="Catalog JSON (default: compiled-in)",
    )
    parser.add_argument("--out", default=None, help="Per-round CSV output path")
    args = parser.parse_args()

    catalog = load_catalog(args.catalog)
    print(f"Running simulation: rounds={args.rounds}, seed={args.seed}, order={args.order}")
    print(f"Catalog hash: {get_catalog_hash(catalog)}")

    stats = run_simulation(
        rounds=args.rounds,
        seed_str=args.seed,
        order=args.order,
        catalog=catalog,
        keep_rows=args.out is not None,
    )
    if args.out:
        write_csv(stats, args.out)
        print(f"Wrote {len(stats.rows)} rows to {args.out}")

    print(f"\nSummary:")
    print(f"  Rounds: {stats.rounds}")
    print(f"  Jackpots: {stats.jackpots} ({stats.jackpot_rate * 100:.4f}%)")
    print(f"  Reaches: {stats.reaches} ({stats.reach_rate * 100:.4f}%)")
    print(f"  Reach -> jackpot: {stats.reach_conversion * 100:.2f}%")
    for meaning, count in stats.jackpots_by_meaning.most_common():
        print(f"    {meaning}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
