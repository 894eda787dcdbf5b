from __future__ import annotations

import json
import os
from pathlib import Path

from dog_match.explain import explain
from dog_match.loader import dog_from_dict, load_candidates
from dog_match.recommender import rank_across_categories, score_candidates


def main() -> None:
    data_dir = Path(os.environ.get("DOG_MATCH_DATA", "data/sample")).resolve()
    dogs = [dog_from_dict(item) for item in json.loads((data_dir / "dogs.json").read_text(encoding="utf-8"))]
    candidates = load_candidates(data_dir / "candidates.json")
    print(f"data={data_dir} dogs={len(dogs)} candidates={len(candidates)}")
    for dog in dogs:
        print(f"\ndog={dog.id} ({dog.name}, {dog.breed})")
        print("  raw=")
        for item in score_candidates(dog, candidates):
            flag = " (ineligible)" if item.result.disqualified else ""
            print(f"    - {item.candidate.id} [{item.kind.value}] {item.score}{flag}")
        recs = rank_across_categories(dog, candidates)
        print("  shown=")
        for item in recs.all:
            summary = explain(item.result)
            print(f"    - {item.candidate.title}: {item.score} {summary.tier} {summary.highlights}")


if __name__ == "__main__":
    main()
