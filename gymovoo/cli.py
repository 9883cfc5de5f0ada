import json
from pathlib import Path

import click

from gymovoo.engine.equipment import classify_environment, resolve_with_warnings
from gymovoo.engine.orchestrator import generate_plans_from_answers
from gymovoo.engine.profile_adapter import normalize_answers
from gymovoo.engine.verifier_fast import fast_verify
from gymovoo.errors import EngineError
from gymovoo.logger import setup_logger
from gymovoo.tools.exercise_db import ExerciseCatalog, load_catalog


@click.group()
@click.option("--log-level", default="WARNING", help="Console log level")
@click.option("--catalog", "catalog_path", type=click.Path(exists=True), help="Alternative exercise catalog JSON")
@click.pass_context
def cli(ctx: click.Context, log_level: str, catalog_path: str | None):
    setup_logger(level=log_level.upper())
    ctx.obj = ExerciseCatalog.from_json(catalog_path) if catalog_path else load_catalog()


@cli.command()
@click.option("--answers", "answers_path", type=click.Path(exists=True), required=True, help="JSON file with questionnaire answers")
@click.option("--tier", type=click.Choice(["basic", "smart", "both"]), default="both")
@click.option("--verify/--no-verify", default=False, help="Attach the deterministic plan checks")
@click.pass_obj
def generate(catalog: ExerciseCatalog, answers_path: str, tier: str, verify: bool):
    """Generate plans from stored answers and print them as JSON."""
    answers = json.loads(Path(answers_path).read_text(encoding="utf-8"))
    try:
        plans, warnings = generate_plans_from_answers(answers, catalog)
    except EngineError as e:
        raise click.ClickException(str(e)) from e

    chosen = {"basic": plans.basic, "smart": plans.smart}
    if tier != "both":
        chosen = {tier: chosen[tier]}
    out = {
        "plans": {name: plan.model_dump(mode="json") for name, plan in chosen.items()},
        "warnings": [w.model_dump(mode="json") for w in warnings],
    }
    if verify:
        profile = normalize_answers(answers).profile
        out["verification"] = {name: fast_verify(profile, plan, catalog) for name, plan in chosen.items()}
    click.echo(json.dumps(out, indent=2))


@cli.command()
@click.option("--location", required=True, help="home_bodyweight, home_equipment or gym")
@click.argument("equipment", nargs=-1)
def equipment(location: str, equipment: tuple):
    """Resolve an equipment selection for a location."""
    try:
        profile, warnings = resolve_with_warnings(location, list(equipment))
    except EngineError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Environment: {classify_environment(profile)}")
    click.echo(f"Equipment: {', '.join(profile.equipment_ids) or 'none (bodyweight)'}")
    for w in warnings:
        click.echo(f"Warning: {w.message}")


@cli.command()
@click.option("--muscle", default=None, help="Primary muscle group")
@click.pass_obj
def exercises(catalog: ExerciseCatalog, muscle: str | None):
    """List catalog exercises."""
    for ex in catalog.filter(primary_muscles=[muscle] if muscle else None):
        kit = ", ".join(ex.required_equipment) or "bodyweight"
        click.echo(f"{ex.id:<32} {ex.primary_muscle:<11} {ex.difficulty.value:<13} {kit}")


if __name__ == "__main__":
    cli()
