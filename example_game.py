"""
Example script demonstrating the game runner with random agents.

This shows how to:
1. Describe a scenario as plain data
2. Run a single game phase by phase
3. Run several seeded games and compare outcomes
"""

from collections import Counter

from infra import configure_logging, get_settings
from runtime import GameRunner, Scenario

SKIRMISH = {
    "width": 16,
    "height": 12,
    "weather": "clear",
    "max_rounds": 12,
    "terrain": [
        {"x": 7, "y": 5, "terrain": "heavy_woods"},
        {"x": 8, "y": 5, "terrain": "light_woods"},
        {"x": 8, "y": 6, "terrain": "rough"},
    ],
    "units": [
        {"template": "hunchback", "side": "player", "x": 2, "y": 4},
        {"template": "jenner", "side": "player", "x": 2, "y": 7},
        {"template": "anti-mech-infantry", "side": "player", "x": 3, "y": 5},
        {"template": "catapult", "side": "ai", "x": 13, "y": 4, "facing": "W"},
        {"template": "vedette", "side": "ai", "x": 13, "y": 7, "facing": "W"},
        {"template": "raven", "side": "ai", "x": 12, "y": 6, "facing": "W"},
    ],
    "agents": [
        {"type": "random", "side": "player", "name": "Player Random", "init_params": {"seed": 42}},
        {"type": "random", "side": "ai", "name": "AI Random", "init_params": {"seed": 43}},
    ],
}


def main():
    """Run example games."""
    settings = get_settings()
    configure_logging("WARNING", logfile=settings.logfile)

    print("Alpha Strike Engine - Example Game Runner")
    print("=" * 80)

    # =========================================================================
    # Example 1: Run a single game and narrate it
    # =========================================================================
    scenario = Scenario.from_dict({**SKIRMISH, "seed": 7})
    runner = GameRunner(scenario)
    while not runner.done:
        frame = runner.step()
        for entry in frame.log:
            print(f"[R{entry['round']} {entry['phase']:>10}] {entry['message']}")
    print(f"\nResult: {runner.outcome}")
    print(f"Battle log saved to {runner.save_log()}")

    # =========================================================================
    # Example 2: Multiple seeded games
    # =========================================================================
    print("\n" + "=" * 80)
    print("Multiple games (10 seeds)")
    print("=" * 80)
    results = Counter()
    for seed in range(10):
        outcome = GameRunner(Scenario.from_dict({**SKIRMISH, "seed": seed})).run()
        results[outcome.result.name] += 1
        print(f"seed {seed}: {outcome}")
    print(dict(results))


if __name__ == "__main__":
    main()
