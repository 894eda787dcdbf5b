import json
import logging
from pathlib import Path
from typing import Optional

import typer

from .compatibility import panel_compatibility, score
from .config import DEFAULT_SCORING_CONFIG, TOP_PICKS_CONFIG
from .derive import estimate_size
from .explain import explain
from .filtering import ThresholdPolicy
from .loader import load_candidates, load_dog
from .models import CandidateKind, ScoredCandidate
from .recommender import rank, rank_across_categories

app = typer.Typer(help="Dog activity matching utilities")


def _load(loader, path: Path):
    try:
        return loader(path)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(f"{path}: {exc}") from exc


def _scored_to_dict(item: ScoredCandidate) -> dict:
    explanation = explain(item.result)
    return {
        "id": item.candidate.id,
        "title": item.candidate.title,
        "kind": item.kind.value,
        "score": item.score,
        "tier": explanation.tier,
        "highlights": explanation.highlights,
        "cautions": explanation.cautions,
    }


@app.command("score")
def score_command(
    dog_json: Path = typer.Argument(..., help="Dog profile JSON file"),
    candidate_json: Path = typer.Argument(..., help="Candidate JSON file (one object)"),
    panel: bool = typer.Option(False, "--panel", help="Use the base-50 recommendation panel score"),
) -> None:
    """Score a single dog/candidate pair."""
    dog = _load(load_dog, dog_json)
    candidates = _load(load_candidates, candidate_json)
    if len(candidates) != 1:
        raise typer.BadParameter(f"{candidate_json}: expected exactly one candidate, found {len(candidates)}")
    candidate = candidates[0]
    result = panel_compatibility(dog, candidate) if panel else score(dog, candidate)
    explanation = explain(result)
    typer.echo(
        json.dumps(
            {
                "dog": dog.id,
                "candidate": candidate.id,
                "kind": candidate.kind.value,
                "score": result.score,
                "disqualified": result.disqualified,
                "tier": explanation.tier,
                "reasons": explanation.details,
            },
            ensure_ascii=False,
        )
    )


@app.command()
def recommend(
    dog_json: Path = typer.Argument(..., help="Dog profile JSON file"),
    candidates_json: Path = typer.Argument(..., help="JSON list of candidates"),
    kind: Optional[CandidateKind] = typer.Option(None, help="Only rank this kind of candidate"),
    limit: Optional[int] = typer.Option(None, min=1, help="Keep at most this many results per list"),
    top_picks: bool = typer.Option(False, "--top-picks", help="Use the flat >50 threshold and a limit of 3"),
    min_score: Optional[int] = typer.Option(None, min=0, max=100, help="Override every threshold"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log scoring decisions to stderr"),
) -> None:
    """Rank candidates for a dog and print them bucketed by kind."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    dog = _load(load_dog, dog_json)
    candidates = _load(load_candidates, candidates_json)

    config = TOP_PICKS_CONFIG if top_picks else DEFAULT_SCORING_CONFIG
    policy = ThresholdPolicy.flat("cli", min_score) if min_score is not None else config.policy
    limit = limit if limit is not None else config.limit

    if kind is not None:
        ranked = rank(dog, candidates, kind, config=config, policy=policy, limit=limit)
        payload = {"dog": dog.id, "buckets": {kind.value: [_scored_to_dict(i) for i in ranked]}}
    else:
        recs = rank_across_categories(dog, candidates, config=config, policy=policy, limit=limit)
        payload = {
            "dog": dog.id,
            "buckets": {k.value: [_scored_to_dict(i) for i in items] for k, items in recs.buckets.items()},
            "all": [_scored_to_dict(i) for i in recs.all],
        }
    typer.echo(json.dumps(payload, ensure_ascii=False))


@app.command("estimate-size")
def estimate_size_command(breed: str = typer.Argument(..., help="Breed name, free text")) -> None:
    """Guess a dog's size from its breed."""
    typer.echo(json.dumps({"breed": breed, "size": estimate_size(breed)}, ensure_ascii=False))


if __name__ == "__main__":
    app()
