"""Form CLI commands: validate, show, preview."""

from pathlib import Path

import click
import yaml

from mailform.declarations.types import FieldRole
from mailform.delivery.dispatchers import OutboxDispatcher
from mailform.delivery.lifecycle import DeliveryLifecycle
from mailform.delivery.types import DeliveryState
from mailform.errors import MailFormError
from mailform.metadata.loader import FormLoader
from mailform.metadata.validator import validate_form_file, validate_forms_dir
from mailform.settings import MailFormSettings


def _load(path: Path) -> FormLoader:
    loader = FormLoader(path)
    try:
        loader.load_all()
    except (ValueError, MailFormError) as e:
        click.echo(click.style(f"Failed to load forms: {e}", fg="red"), err=True)
        raise SystemExit(1)
    return loader


def _parse_data(pairs: tuple[str, ...]) -> dict[str, str]:
    data: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"expected key=value, got '{pair}'", param_hint="--data")
        key, value = pair.split("=", 1)
        data[key.strip()] = value
    return data


@click.group()
def forms():
    """Form definition commands."""
    pass


@forms.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors.")
def validate(path: Path, strict: bool):
    """Validate form YAML files against the form schema."""
    if path.is_dir():
        issues = validate_forms_dir(path, strict=strict)
    else:
        issues = validate_form_file(path)
        if strict:
            for issue in issues:
                issue.severity = "error"

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} schema error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    # Semantic validation: build the classes and resolve their configuration
    loader = _load(path)
    for name in loader.list_forms():
        try:
            loader.forms[name].configuration()
        except MailFormError as e:
            click.echo(click.style(f"{name}: {e}", fg="red"), err=True)
            raise SystemExit(1)

    click.echo(click.style(f"All {len(loader.list_forms())} form(s) are valid.", fg="green", bold=True))


@forms.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def show(path: Path):
    """List forms with their fields by role."""
    loader = _load(path)
    for name in sorted(loader.list_forms()):
        try:
            config = loader.forms[name].configuration()
        except MailFormError as e:
            click.echo(click.style(f"{name}: {e}", fg="red"), err=True)
            raise SystemExit(1)
        click.echo(
            f"{name}: {len(config.field_names(FieldRole.PLAIN))} attribute(s), "
            f"{len(config.field_names(FieldRole.ATTACHMENT))} attachment(s), "
            f"{len(config.field_names(FieldRole.HONEYPOT))} honeypot(s)"
        )
        for role in FieldRole:
            names = config.field_names(role)
            if names:
                click.echo(f"  {role.value}: {', '.join(names)}")
        if config.appended_request_fields:
            click.echo(f"  append: {', '.join(config.appended_request_fields)}")


@forms.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.argument("form_name")
@click.option("--data", "-d", multiple=True, help="Field value as key=value (repeatable).")
@click.option("--force", is_flag=True, default=False, help="Skip validation and spam checks.")
@click.pass_obj
def preview(
    settings: MailFormSettings | None,
    path: Path,
    form_name: str,
    data: tuple[str, ...],
    force: bool,
):
    """Run a form through the lifecycle and print the mail it would send."""
    loader = _load(path)
    form_class = loader.get_form(form_name)
    if form_class is None:
        click.echo(f"Error: form '{form_name}' not found", err=True)
        raise SystemExit(1)

    try:
        form = form_class(_parse_data(data))
    except (TypeError, MailFormError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    outbox = OutboxDispatcher()
    lifecycle = DeliveryLifecycle(
        dispatcher=outbox, settings=settings or MailFormSettings.from_env()
    )
    try:
        result = lifecycle.force_deliver(form) if force else lifecycle.create(form)
    except MailFormError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(f"State: {result.state.value}")
    if result.state is DeliveryState.REJECTED_INVALID:
        for error in result.validation.errors:
            click.echo(click.style(f"  {error.field or 'base'}: {error.message}", fg="red"))
        raise SystemExit(1)
    if result.state is DeliveryState.REJECTED_SPAM:
        raise SystemExit(1)

    click.echo(yaml.safe_dump(outbox.deliveries[-1].to_dict(), sort_keys=False))
