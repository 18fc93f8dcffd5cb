from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

import jsonschema

from blade.core.errors import ManifestInvalid
from blade.registry.command_registry import CommandRegistry


SCHEMA_VERSION = "1"

REHASH_HINT = "blade --no-manifest rehash"

# Only the envelope is checked on load. Entries are checked one at a time
# when a command is resolved, so a single bad entry does not hide the rest.
MANIFEST_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "blade plugin manifest",
    "type": "object",
    "required": ["commands"],
    "properties": {
        "schema_version": {"type": "string"},
        "commands": {
            "type": "object",
            "additionalProperties": {"type": "object"},
        },
    },
}


@dataclass(frozen=True)
class CommandEntry:
    key: str
    raw: Dict[str, Any]

    @property
    def paths(self) -> Optional[List[str]]:
        v = self.raw.get("paths")
        return v if isinstance(v, list) else None

    @property
    def category(self) -> str:
        v = self.raw.get("category")
        if isinstance(v, str) and v:
            return v
        return self.key.split("_", 1)[0]

    def is_valid(self) -> bool:
        paths = self.paths
        return bool(paths) and all(isinstance(p, str) and p for p in paths)


def regenerate_hint(path: Optional[Path | str]) -> str:
    where = str(path) if path is not None else "the plugin manifest"
    return "Try running: {} or removing {}".format(REHASH_HINT, where)


def validate_manifest_data(data: Any) -> List[str]:
    validator = jsonschema.Draft202012Validator(MANIFEST_SCHEMA)
    return [e.message for e in sorted(validator.iter_errors(data), key=str)]


class CommandManifest(Mapping[str, CommandEntry]):
    """
    Read-only index: command key ("node_show") -> CommandEntry.

    Produced by `blade rehash`; may be stale relative to the plugin files on disk.
    """

    def __init__(self, entries: Mapping[str, CommandEntry], *, path: Optional[Path] = None):
        self._entries: Dict[str, CommandEntry] = dict(entries)
        self._path = path

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @classmethod
    def from_dict(cls, data: Any, *, path: Optional[Path] = None) -> "CommandManifest":
        errors = validate_manifest_data(data)
        if errors:
            raise ManifestInvalid(
                code="manifest.invalid",
                message="Plugin manifest validation failed: {}. {}".format(path or "<memory>", regenerate_hint(path)),
                data={"errors": errors},
            )
        commands = data["commands"]
        return cls({k: CommandEntry(key=k, raw=v) for k, v in commands.items()}, path=path)

    @classmethod
    def load(cls, path: Path) -> "CommandManifest":
        # FileNotFoundError propagates: a missing manifest is not a corrupt one.
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ManifestInvalid(
                code="manifest.invalid",
                message="Plugin manifest is not valid JSON: {}. {}".format(path, regenerate_hint(path)),
                data={"error": str(e)},
            ) from e
        except OSError as e:
            raise ManifestInvalid(
                code="manifest.invalid",
                message="Plugin manifest could not be read: {}. {}".format(path, regenerate_hint(path)),
                data={"error": str(e)},
            ) from e
        return cls.from_dict(data, path=path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "commands": {k: dict(self._entries[k].raw) for k in sorted(self._entries.keys())},
        }

    def all_paths(self) -> List[str]:
        out: List[str] = []
        for entry in self._entries.values():
            out.extend(entry.paths or [])
        return out

    def __getitem__(self, key: str) -> CommandEntry:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def generate_manifest(registry: CommandRegistry) -> CommandManifest:
    """
    Build a manifest from what the registry recorded during activation.

    Commands registered outside of a plugin file have no source path and are skipped.
    """
    entries: Dict[str, CommandEntry] = {}
    for name in registry.names():
        files = registry.files_for(name)
        if not files:
            continue
        cls = registry.subcommands[name]
        entries[name] = CommandEntry(key=name, raw={"paths": files, "category": cls.command_category()})
    return CommandManifest(entries)


def write_manifest(path: Path, manifest: CommandManifest) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2, sort_keys=True) + "\n", encoding="utf-8")
