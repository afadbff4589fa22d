"""Headless run - drive a terrarium session with simulated time and print reports.

Time is simulated, so an hour of dragon life runs in a moment. With
``--care`` a simple keeper feeds, waters and cleans whenever a stat gets
low; without it the dragon is left alone.

Run: python examples/headless.py --seconds 3600 --care
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from terrarium import Controls, JsonFileStore, MemoryStore, Report, Session, SimConfig

FRAME = 0.25


class SimulatedTime:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="terrarium headless run")
    p.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    p.add_argument("--name", default="Spike", help="Dragon name")
    p.add_argument("--color", default="normal", help="Color morph tag")
    p.add_argument("--seconds", type=float, default=600.0,
                   help="Simulated seconds to run (default: 600)")
    p.add_argument("--save", type=Path, default=None, metavar="FILE",
                   help="JSON save file (default: in-memory)")
    p.add_argument("--load", action="store_true", help="Resume from --save instead of hatching")
    p.add_argument("--care", action="store_true", help="Let a simple keeper look after the dragon")
    p.add_argument("--cold", action="store_true", help="Run with the heat lamp turned down")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args()


def print_report(report: Report) -> None:
    if report.channel == "animation":
        return
    tag = "!!" if report.channel == "notification" else "  "
    print(f"{tag} [tick {report.tick:5d}] {report.level:<7} {report.text}")


def keeper(session: Session) -> None:
    creature = session.creature
    if creature is None or session.is_moving:
        return
    if creature.hunger < 40:
        food = "crickets" if creature.stage in ("baby", "juvenile") else "collards"
        session.feed(food)
    elif creature.hydration < 40:
        session.give_water()
    elif session.terrarium.enclosure.cleanliness < 40:
        session.clean_tank()
    elif creature.happiness < 50:
        session.handle()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    clock = SimulatedTime()
    controls = Controls(basking_temp=88 if args.cold else 100)
    store = JsonFileStore(args.save) if args.save is not None else MemoryStore()
    session = Session(controls=controls, store=store, config=SimConfig(),
                      seed=args.seed, now=clock, on_environment_restored=controls.apply)
    session.log.subscribe(print_report)

    if args.load:
        if not session.load():
            print("No saved game found!")
            return
    else:
        session.start(args.name, args.color)

    elapsed = 0.0
    while elapsed < args.seconds and session.running:
        clock.now += FRAME
        elapsed += FRAME
        session.advance(FRAME)
        if args.care:
            keeper(session)

    creature = session.creature
    session.close()
    if creature is not None:
        print(f"\n{creature.name}: {creature.age} days, {creature.stage}, "
              f"{creature.size:.1f} in, mood {creature.mood}")
        print(f"  health {creature.health:.0f}  hunger {creature.hunger:.0f}  "
              f"hydration {creature.hydration:.0f}  happiness {creature.happiness:.0f}")


if __name__ == "__main__":
    main()
