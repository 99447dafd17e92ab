"""
Run a ranking session against a simulated judge.

Each item gets a hidden memorability score; the judge prefers the more
memorable item (with some noise) and recognizes items whose score clears a
noisy threshold. After enough rounds the ratings should track the hidden
scores.
"""

import logging

import numpy as np

from memorank import JsonFileStore, Mode, RankingSession, StaticCatalog
from memorank.rankings import bias_stage, ranking_summary, sort_items


NAMES = [
    "pidgey", "rattata", "spearow", "ekans", "sandshrew", "nidoran",
    "zubat", "oddish", "paras", "venonat", "diglett", "meowth",
]


def main():
    logging.basicConfig(level=logging.INFO)
    print("Memorability Ranking Demonstration")
    print("----------------------------------")
    
    catalog = StaticCatalog(
        (i + 1, name, i + 1, None) for i, name in enumerate(NAMES)
    )
    store = JsonFileStore("data/demo_rankings.json")
    session = RankingSession(catalog, store, group_size=4, seed=42)
    session.reset()
    
    judge_rng = np.random.default_rng(7)
    hidden = {i + 1: judge_rng.normal() for i in range(len(NAMES))}
    
    # Pairwise rounds: the more memorable item usually wins
    for _ in range(300):
        left, right = session.pending_items
        noisy_left = hidden[left.id] + judge_rng.normal(scale=0.5)
        noisy_right = hidden[right.id] + judge_rng.normal(scale=0.5)
        if noisy_left >= noisy_right:
            session.submit_pair_judgment(left.id, right.id)
        else:
            session.submit_pair_judgment(right.id, left.id)
    
    # Recognition rounds: items above a noisy threshold are recognized
    session.switch_mode(Mode.GROUP)
    for _ in range(100):
        group = session.pending_items
        recognized = [
            item.id for item in group
            if hidden[item.id] + judge_rng.normal(scale=0.5) > 0
        ]
        session.submit_group_judgment(recognized)
    
    summary = ranking_summary(session.population, session.total_judgments)
    print(f"\nJudgments: {summary.total_judgments} ({bias_stage(summary.total_judgments)} stage)")
    print(f"Least memorable: {summary.least_memorable.display_name} ({summary.least_memorable.rating})")
    print(f"Rating range: {summary.lowest_rating} - {summary.highest_rating} (spread: {summary.rating_spread})")
    
    print("\nRankings:")
    for position, item in enumerate(sort_items(session.population), start=1):
        print(
            f"#{position:<3} {item.display_name:<10} {item.rating:>5}  "
            f"W: {item.wins} | L: {item.losses} | hidden: {hidden[item.id]:+.2f}"
        )


if __name__ == "__main__":
    main()
