"""Planstellen-Rechner — Haupt-CLI.

Verwendung:
  python main.py init                       Eingabewerte-Datei anlegen
  python main.py policy show                Eingabewerte anzeigen
  python main.py demo                       Demo-Datensatz erzeugen
  python main.py hours                      Stundenbedarf pro Jahrgang
  python main.py planstellen --mode policy  Planstellen aus dem Arbeitsblatt
  python main.py planstellen --mode roster  Planstellen aus dem Bestand
  python main.py optimize                   Lehrkräfte automatisch zuweisen
  python main.py validate                   Zuweisungen prüfen
  python main.py team add <id> <lehrer...>  Team-Teaching bilden
  python main.py team remove <id>           Zeile aus Team-Teaching lösen
  python main.py team check                 Team-Teaching-Gruppen prüfen
  python main.py export                     Excel + PDF exportieren
  python main.py scenario save <name>       Szenario speichern
  python main.py scenario load <name>       Szenario laden
  python main.py scenario list              Szenarien auflisten
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfad für gespeicherte SchoolData
DEFAULT_DATA_JSON = Path("output/school_data.json")


def _load_policy():
    """Lädt die Eingabewerte; ohne Datei gelten die Defaults."""
    from config.manager import ConfigManager
    from config.defaults import default_policy_input
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[dim]Keine Eingabewerte-Datei gefunden, verwende Defaults "
            "(python main.py init legt sie an).[/dim]"
        )
        return mgr, default_policy_input()
    try:
        return mgr, mgr.load()
    except ValueError as e:
        console.print(f"[red bold]Eingabewerte ungültig:[/red bold]\n{e}")
        sys.exit(1)


def _load_data_or_abort(json_path: str):
    """Lädt den Datensatz oder bricht mit Fehlermeldung ab."""
    from models.school_data import SchoolData
    p = Path(json_path)
    if not p.exists():
        console.print(
            f"[red]Keine Datendatei gefunden: {p}[/red]\n"
            "Erzeugen Sie zunächst einen Datensatz mit [bold]python main.py demo[/bold]."
        )
        sys.exit(1)
    console.print(f"[bold]Lade Datensatz:[/bold] {p}")
    return SchoolData.load_json(p)


def _print_lines(lines, title: str) -> None:
    """Gibt Planstellen-Berichtszeilen als Rich-Tabelle aus."""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Jg.", justify="right", width=4)
    table.add_column("Bezeichnung")
    table.add_column("Bedarf", justify="right")
    table.add_column("Vorhanden", justify="right")
    table.add_column("Differenz", justify="right")

    for line in lines:
        style = "bold" if line.line_type != "requirement" else ""
        deficit = ""
        if line.line_type == "requirement":
            color = "red" if line.deficit > 0 else "green"
            deficit = f"[{color}]{line.deficit:+.2f}[/{color}]"
        table.add_row(
            str(line.grade) if line.grade is not None else "",
            line.component,
            # Grunddaten tragen keine Stunden, angezeigt wird der Eingabewert
            f"[dim]{line.formula.terms[0]:g}[/dim]" if line.category == "grunddaten"
            else f"{line.required_hours:.2f}",
            f"{line.available_hours:.2f}" if line.available_hours else "",
            deficit,
            style=style,
        )
    console.print(table)


# ─── INIT ─────────────────────────────────────────────────────────────────────

@click.command("init")
def cmd_init():
    """Legt die Eingabewerte-Datei mit den Defaults an."""
    from config.manager import ConfigManager
    from config.defaults import default_policy_input

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print(
            f"[yellow]{mgr.DEFAULT_CONFIG} existiert bereits.[/yellow]"
        )
        if not click.confirm("Mit Defaults überschreiben?", default=False):
            return
    mgr.save(default_policy_input())
    console.print("Bearbeiten Sie die Datei und starten Sie dann "
                  "[bold]python main.py planstellen[/bold].")


# ─── POLICY ───────────────────────────────────────────────────────────────────

@click.group("policy")
def cmd_policy():
    """Eingabewerte des Planstellen-Arbeitsblatts."""


@cmd_policy.command("show")
def policy_show():
    """Zeigt die aktuellen Eingabewerte an."""
    mgr, policy = _load_policy()
    console.print(Panel(
        f"[bold]{policy.school_name}[/bold]  |  Schuljahr {policy.school_year}",
        title="Planstellen-Eingabewerte",
        border_style="cyan",
    ))
    mgr.show(policy)


# ─── DEMO ─────────────────────────────────────────────────────────────────────

@click.command("demo")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--classes-per-grade", default=3, help="Parallelklassen pro Jahrgang.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für JSON-Export.")
def cmd_demo(seed: int, classes_per_grade: int, json_path: str):
    """Erzeugt einen Demo-Datensatz (Lehrkräfte, Klassen, Fächer)."""
    from data.demo_data import DemoDataGenerator

    console.print("[bold]Demo-Daten werden generiert...[/bold]")
    gen = DemoDataGenerator(seed=seed, classes_per_grade=classes_per_grade)
    data = gen.generate()
    gen.print_summary(data)
    console.print(f"\n[dim]{data.summary()}[/dim]")

    out_path = Path(json_path)
    data.save_json(out_path)
    console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── HOURS ────────────────────────────────────────────────────────────────────

@click.command("hours")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
@click.option("--classes", "show_classes", is_flag=True, default=False,
              help="Zusätzlich Rohsumme vs. korrigierte Summe pro Klasse.")
def cmd_hours(json_path: str, show_classes: bool):
    """Zeigt den Stundenbedarf pro Jahrgang (ohne Doppelzählung)."""
    from solver.hours import HourAggregator, ParallelGroupResolver

    data = _load_data_or_abort(json_path)
    resolver = ParallelGroupResolver(data.parallel_groups)
    grade_hours = HourAggregator(resolver).aggregate(data.classes)

    table = Table(title="Stundenbedarf pro Jahrgang", box=box.ROUNDED)
    table.add_column("Jahrgang", justify="right")
    table.add_column("Klassen", justify="right")
    table.add_column("Parallelgruppen")
    table.add_column("Einzelfächer", justify="right")
    table.add_column("Gesamt", justify="right", style="bold")
    for grade, gh in sorted(grade_hours.items()):
        groups = ", ".join(f"{g}={h:g}" for g, h in gh.parallel_group_hours.items())
        table.add_row(
            str(grade), str(gh.class_count), groups or "-",
            f"{sum(gh.regular_hours.values()):g}", f"{gh.total_hours:g}",
        )
    console.print(table)

    if show_classes:
        t2 = Table(title="Klassen", box=box.ROUNDED)
        t2.add_column("Klasse")
        t2.add_column("Roh", justify="right")
        t2.add_column("Korrigiert", justify="right")
        t2.add_column("Gespart", justify="right")
        for cls in data.classes:
            s = resolver.class_summary(cls)
            t2.add_row(cls.name, f"{s.raw_total:g}", f"{s.corrected_total:g}",
                       f"{s.saved_hours:g}")
        console.print(t2)


# ─── PLANSTELLEN ──────────────────────────────────────────────────────────────

@click.command("planstellen")
@click.option("--mode", type=click.Choice(["policy", "roster"]), default="policy",
              help="policy = Arbeitsblatt, roster = aus dem Bestand.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei (nur roster).")
def cmd_planstellen(mode: str, json_path: str):
    """Berechnet den Planstellen-Bericht."""
    from solver.staffing import StaffingCalculator

    if mode == "policy":
        mgr, policy = _load_policy()
        calc = StaffingCalculator().calculate_from_policy(policy)
        _print_lines(calc.lines, f"Planstellenberechnung {policy.school_year}")
        console.print(Panel(
            f"Schüler/Relation: {calc.quotient:.4f} → abgeschnitten "
            f"[bold]{calc.quotient_truncated:.2f}[/bold] "
            f"(gerundet {calc.rounded_base:g})\n"
            f"Grundbedarf: {calc.sum_base_need:.2f} | "
            f"Ausgleichsbedarf: {calc.sum_compensation_need:.2f} | "
            f"Weitere: {calc.sum_other_areas:.2f}\n"
            f"Gesamt: [bold]{calc.grand_total_hours:.2f}[/bold] → "
            f"[bold green]{calc.required_positions:.2f} Planstellen[/bold green]\n"
            f"Stellen-Soll: {calc.total_position_need:.2f} | "
            f"Differenz Soll-Ist: {calc.position_difference:+.2f}\n"
            f"Entlastungsstunden Kollegium: {calc.relief_hours_staff:g} | "
            f"Schulleiter-/Stellvertreterpauschale: "
            f"{calc.principal_allowance:g} / {calc.deputy_allowance:g}\n"
            f"Sollklassenzahl: {calc.target_class_count:.2f} "
            f"(Abweichung {calc.class_count_difference:+.2f})",
            title="Ergebnis",
            border_style="green",
        ))
        return

    from solver.hours import HourAggregator, ParallelGroupResolver
    data = _load_data_or_abort(json_path)
    grade_hours = HourAggregator(ParallelGroupResolver(data.parallel_groups)).aggregate(data.classes)
    lines = StaffingCalculator(data.parallel_groups).calculate_from_roster(
        grade_hours, data.subjects, data.teachers,
    )
    _print_lines(lines, "Planstellen aus dem Bestand")


# ─── OPTIMIZE ─────────────────────────────────────────────────────────────────

@click.command("optimize")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
@click.option("--dry-run", is_flag=True, default=False,
              help="Ergebnis nur anzeigen, nicht speichern.")
def cmd_optimize(json_path: str, dry_run: bool):
    """Weist Lehrkräfte automatisch zu (ersetzt ALLE bisherigen Zuweisungen)."""
    from solver.optimizer import AssignmentOptimizer
    from analysis.workload_report import WorkloadAnalyzer

    data = _load_data_or_abort(json_path)
    optimizer = AssignmentOptimizer()
    result = optimizer.run(data)

    console.print(Panel(
        f"Verworfen: {result.discarded_count} | "
        f"Neu: [bold]{result.created_count}[/bold] Zuweisungen\n"
        f"Streng: {result.strict_count} | Ausweich: {result.fallback_count} | "
        f"[red]Unbesetzt: {result.unresolved_count}[/red]",
        title="Optimierung",
        border_style="cyan",
    ))
    if result.unresolved:
        table = Table(title="Unbesetzter Bedarf", box=box.ROUNDED)
        table.add_column("Klasse")
        table.add_column("Fach")
        table.add_column("Std./Woche", justify="right")
        for u in result.unresolved:
            table.add_row(u.class_name, u.base_subject, f"{u.weekly_hours:g}")
        console.print(table)

    analyzer = WorkloadAnalyzer(optimizer=optimizer)
    analyzer.print_rich(analyzer.analyze(data, result))

    if not dry_run:
        data.save_json(Path(json_path))
        console.print(f"[green]✓[/green] Zuweisungen gespeichert: {json_path}")


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
def cmd_validate(json_path: str):
    """Prüft die Zuweisungen (Deputat, Team-Teaching, Qualifikation)."""
    from analysis.assignment_validator import AssignmentValidator

    data = _load_data_or_abort(json_path)
    console.print(f"\n{data.summary()}\n")
    report = AssignmentValidator().validate(data)
    report.print_rich()

    sys.exit(0 if report.is_valid else 1)


# ─── TEAM ─────────────────────────────────────────────────────────────────────

@click.group("team")
def cmd_team():
    """Team-Teaching verwalten."""


@cmd_team.command("add")
@click.argument("assignment_id")
@click.argument("teacher_ids", nargs=-1, required=True)
@click.option("--json-path", default=str(DEFAULT_DATA_JSON))
def team_add(assignment_id: str, teacher_ids: tuple[str, ...], json_path: str):
    """Bildet aus einer Zuweisung eine Team-Teaching-Gruppe."""
    from analysis.team_teaching import TeamTeachingError, create_team_teaching

    data = _load_data_or_abort(json_path)
    try:
        group = create_team_teaching(
            data.assignments, assignment_id, list(teacher_ids), data.teachers,
        )
    except TeamTeachingError as e:
        console.print(f"[red bold]Team-Teaching fehlgeschlagen:[/red bold] {e}")
        sys.exit(1)
    data.save_json(Path(json_path))
    console.print(
        f"[green]✓[/green] Team-Teaching mit {len(group)} Lehrkräften: "
        f"{', '.join(a.teacher_id for a in group)}"
    )


@cmd_team.command("remove")
@click.argument("assignment_id")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON))
def team_remove(assignment_id: str, json_path: str):
    """Löst eine Zuweisung aus ihrer Team-Teaching-Gruppe."""
    from analysis.team_teaching import TeamTeachingError, remove_from_team_teaching

    data = _load_data_or_abort(json_path)
    try:
        remove_from_team_teaching(data.assignments, assignment_id)
    except TeamTeachingError as e:
        console.print(f"[red bold]Fehler:[/red bold] {e}")
        sys.exit(1)
    data.save_json(Path(json_path))
    console.print(f"[green]✓[/green] Zuweisung {assignment_id} aus Team-Teaching gelöst.")


@cmd_team.command("check")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON))
def team_check(json_path: str):
    """Prüft alle Team-Teaching-Gruppen."""
    from analysis.team_teaching import team_ids, validate_team_teaching_group

    data = _load_data_or_abort(json_path)
    ids = team_ids(data.assignments)
    if not ids:
        console.print("[dim]Keine Team-Teaching-Gruppen vorhanden.[/dim]")
        return

    all_valid = True
    for team_id in ids:
        report = validate_team_teaching_group(data.assignments, team_id)
        if report.is_valid:
            console.print(f"[green]✓[/green] {team_id[:8]}")
        else:
            all_valid = False
            console.print(f"[red]✗[/red] {team_id[:8]}: " + "; ".join(report.errors))
    sys.exit(0 if all_valid else 1)


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@click.option("--mode", type=click.Choice(["policy", "roster"]), default="policy")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON))
@click.option("--output-dir", default="output", help="Zielverzeichnis.")
@click.option("--no-pdf", is_flag=True, default=False, help="Kein PDF erzeugen.")
def cmd_export(mode: str, json_path: str, output_dir: str, no_pdf: bool):
    """Exportiert Planstellen-Bericht und Zuweisungen als Excel und PDF."""
    from analysis.workload_report import WorkloadAnalyzer
    from export import ExcelExporter, PdfExporter
    from models.school_data import SchoolData
    from solver.hours import HourAggregator, ParallelGroupResolver
    from solver.staffing import StaffingCalculator

    if mode == "roster" or Path(json_path).exists():
        data = _load_data_or_abort(json_path)
    else:
        data = SchoolData()

    grade_hours = HourAggregator(ParallelGroupResolver(data.parallel_groups)).aggregate(data.classes)
    calculator = StaffingCalculator(data.parallel_groups)
    if mode == "policy":
        mgr, policy = _load_policy()
        data.school_name, data.school_year = policy.school_name, policy.school_year
        lines = calculator.calculate_from_policy(policy).lines
    else:
        lines = calculator.calculate_from_roster(grade_hours, data.subjects, data.teachers)

    report = WorkloadAnalyzer().analyze(data) if data.assignments else None

    out = Path(output_dir)
    xlsx_path = out / "planstellen.xlsx"
    ExcelExporter(data, lines, grade_hours).export(xlsx_path, workload_report=report)
    console.print(f"[green]✓[/green] Excel: {xlsx_path}")

    if not no_pdf:
        pdf_path = out / "planstellen.pdf"
        PdfExporter(data, lines).export_report(
            pdf_path, include_assignments=bool(data.assignments),
        )
        console.print(f"[green]✓[/green] PDF: {pdf_path}")


# ─── SCENARIO ─────────────────────────────────────────────────────────────────

@click.group("scenario")
def cmd_scenario():
    """Szenarien der Eingabewerte verwalten (speichern, laden, auflisten)."""


@cmd_scenario.command("save")
@click.argument("name")
@click.option("--description", "-d", default="", help="Beschreibung des Szenarios.")
def scenario_save(name: str, description: str):
    """Speichert die aktuellen Eingabewerte als Szenario."""
    mgr, policy = _load_policy()
    mgr.save_scenario(policy, name, description)


@cmd_scenario.command("load")
@click.argument("name")
def scenario_load(name: str):
    """Lädt ein gespeichertes Szenario als aktive Eingabewerte."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        policy = mgr.load_scenario(name)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    mgr.save(policy)
    console.print(f"[green]✓[/green] Szenario '{name}' als aktive Eingabewerte gesetzt.")


@cmd_scenario.command("list")
def scenario_list():
    """Listet alle gespeicherten Szenarien auf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    scenarios = mgr.list_scenarios()

    if not scenarios:
        console.print("[dim]Keine Szenarien vorhanden.[/dim]")
        return

    table = Table(title="Gespeicherte Szenarien", box=box.ROUNDED)
    table.add_column("Name", style="bold")
    table.add_column("Erstellt")
    table.add_column("Beschreibung")
    for s in scenarios:
        table.add_row(s["name"], s.get("created", ""), s.get("description", ""))
    console.print(table)


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Log-Ausgabe (DEBUG).")
def cli(verbose: bool):
    """Planstellen-Rechner für Realschulen (Sek I).

    Starten Sie mit: python main.py init
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_init)
cli.add_command(cmd_policy)
cli.add_command(cmd_demo)
cli.add_command(cmd_hours)
cli.add_command(cmd_planstellen)
cli.add_command(cmd_optimize)
cli.add_command(cmd_validate)
cli.add_command(cmd_team)
cli.add_command(cmd_export)
cli.add_command(cmd_scenario)


if __name__ == "__main__":
    main()
