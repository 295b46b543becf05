"""Konfigurationsmanager: Laden und Speichern der Planstellen-Eingabewerte.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import (
    ADDITIONAL_POSITION_FIELDS,
    BASE_DATA_FIELDS,
    COMPENSATION_FIELDS,
    OTHER_AREA_FIELDS,
    PERSONNEL_FIELDS,
    STAFFING_FIELDS,
    PolicyInput,
)

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Planstellen-Rechner — Eingabewerte Arbeitsblatt
# Version: 1.0 (Realschule, Sekundarstufe I)
# Erstellt: {date.today().isoformat()}
# ============================================
"""

# Erstes Feld eines Abschnitts → (Titel, Erläuterung)
_SECTION_COMMENTS = {
    "school_name": ("Grunddaten", None),
    BASE_DATA_FIELDS[0]: (
        "Grundbedarf",
        "Schülerzahl / Relation, abgeschnitten auf 2 Nachkommastellen.",
    ),
    COMPENSATION_FIELDS[0]: (
        "Ausgleichsbedarf",
        "Alle Werte in Stellen-Anteilen. Fehlende Werte zählen als 0.",
    ),
    OTHER_AREA_FIELDS[0]: ("Weitere Bereiche", None),
    "free_line_1_label": (
        "Freie Zeilen",
        "Werte ungleich 0 erscheinen im Bericht und zählen zu den weiteren Bereichen.",
    ),
    "per_position_deputat": ("Deputat", "Wochenstunden einer vollen Stelle."),
    ADDITIONAL_POSITION_FIELDS[0]: ("Zusätzliche Stellen", None),
    STAFFING_FIELDS[0]: ("Stellenbesetzung", "Zählt zum Stellenbedarf insgesamt."),
    PERSONNEL_FIELDS[0]: ("Personalausstattung", "Zählt zum Stellenbedarf insgesamt."),
    "vorhandene_planstellen": (
        "Istbestand und Entlastung Kollegium",
        "Differenz Soll-Ist = Istbestand - Stellenbedarf insgesamt.",
    ),
    "grundpauschale": ("Schulleiter- und Stellvertreterpauschale", None),
    "istklassenzahl": ("Klassenbildung", "Sollklassenzahl = Schülerzahl / 28."),
    "verfuegbare_unterrichtsstunden": ("Statistik Unterrichtsstunden", None),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "planstellen.yaml"
    SCENARIOS_DIR = Path("scenarios")

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> PolicyInput:
        """Lade Eingabewerte aus YAML. Validiert automatisch via Pydantic."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py init' aus, um die Eingabewerte anzulegen."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return PolicyInput.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    # ─── Speichern ───

    def save(self, policy: PolicyInput, path: Optional[Path] = None) -> None:
        """Speichere Eingabewerte als YAML mit deutschen Kommentaren."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(policy)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, policy: PolicyInput) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(policy.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            if field not in cm:
                continue
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        # Zeilenbezeichnung aus dem Bericht als Inline-Kommentar
        for field in (*COMPENSATION_FIELDS, *OTHER_AREA_FIELDS,
                      *STAFFING_FIELDS, *PERSONNEL_FIELDS):
            description = PolicyInput.model_fields[field].description
            if description:
                cm.yaml_add_eol_comment(description, field)

        return cm

    # ─── Szenarios ───

    def save_scenario(self, policy: PolicyInput, name: str,
                      description: str = "", overwrite: bool = False) -> bool:
        """Speichert Eingabewerte als benanntes Szenario (z.B. "ohne_praxissemester")."""
        self.SCENARIOS_DIR.mkdir(parents=True, exist_ok=True)
        path = self.SCENARIOS_DIR / f"{name}.yaml"
        if path.exists() and not overwrite:
            if not Confirm.ask(
                f"Szenario '{name}' existiert bereits. Überschreiben?", default=False
            ):
                console.print("[yellow]Abgebrochen.[/yellow]")
                return False
        self.save(policy, path)
        # Beschreibung in separater Metadaten-Datei
        if description:
            meta_path = self.SCENARIOS_DIR / f"{name}.meta.yaml"
            with open(meta_path, "w", encoding="utf-8") as f:
                yaml.dump({"name": name, "description": description,
                           "created": date.today().isoformat()}, f)
        console.print(f"[green]✓[/green] Szenario '{name}' gespeichert.")
        return True

    def list_scenarios(self) -> list[dict]:
        """Listet alle gespeicherten Szenarien auf."""
        if not self.SCENARIOS_DIR.exists():
            return []
        scenarios = []
        for p in sorted(self.SCENARIOS_DIR.glob("*.yaml")):
            if p.stem.endswith(".meta"):
                continue
            meta_path = self.SCENARIOS_DIR / f"{p.stem}.meta.yaml"
            description = ""
            created = ""
            if meta_path.exists():
                with open(meta_path, "r", encoding="utf-8") as f:
                    meta = yaml.load(f)
                    description = meta.get("description", "")
                    # ruamel liest ISO-Daten als datetime.date
                    created = str(meta.get("created", ""))
            scenarios.append({
                "name": p.stem,
                "path": str(p),
                "description": description,
                "created": created,
            })
        return scenarios

    def load_scenario(self, name: str) -> PolicyInput:
        """Lädt ein gespeichertes Szenario."""
        path = self.SCENARIOS_DIR / f"{name}.yaml"
        if not path.exists():
            raise FileNotFoundError(
                f"Szenario '{name}' nicht gefunden. "
                f"Verfügbar: {[s['name'] for s in self.list_scenarios()]}"
            )
        return self.load(path)

    # ─── Anzeige ───

    def show(self, policy: PolicyInput) -> None:
        """Zeigt alle Eingabewerte als Tabelle."""
        table = Table(title="Planstellen-Eingabewerte", box=box.SIMPLE)
        table.add_column("Feld", style="dim")
        table.add_column("Bezeichnung", style="bold")
        table.add_column("Wert", justify="right")
        for name, field in PolicyInput.model_fields.items():
            value = getattr(policy, name)
            shown = f"{value:g}" if isinstance(value, float) else str(value)
            table.add_row(name, field.description or "", shown)
        console.print(table)
