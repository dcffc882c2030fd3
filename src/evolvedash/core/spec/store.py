"""
YAML spec document store.

The spec document declares the dashboard's features and workflows:

```yaml
app_name: Self-Evolving Dashboard
description: Dashboard that grows new widgets from feature requests
features:
  feature_3f2a...:
    name: add_a_weather_widget
    description: Add a weather widget
    status: completed
workflows:
  - id: workflow_k2j4...
    name: Nightly report
    trigger:
      type: schedule
      schedule: "0 2 * * *"
```

Every mutation reads the whole file, applies one change, and rewrites the
whole file through a temp file + os.replace, so readers never observe a
truncated document. There is no coordination between concurrent writers:
the last write wins.
"""

import copy
import logging
import os
import re
import secrets
import tempfile
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from evolvedash.core.errors import StoreError

logger = logging.getLogger(__name__)

SpecDocument = dict[str, Any]
SpecMutator = Callable[[SpecDocument], SpecDocument | None]

FEATURE_NAME_MAX_LENGTH = 50


def default_document(app_name: str = "Self-Evolving Dashboard") -> SpecDocument:
    """Build the document written by `SpecStore.initialize()`."""
    return {
        "app_name": app_name,
        "description": "Dashboard that grows new components from natural-language feature requests",
        "features": {},
        "workflows": [],
    }


def feature_name_from_description(description: str) -> str:
    """
    Derive a feature name slug from request text.

    Example:
        >>> feature_name_from_description("Add a Weather widget!")
        'add_a_weather_widget'
    """
    cleaned = re.sub(r"[^a-z0-9\s]", "", description.lower())
    slug = re.sub(r"\s+", "_", cleaned.strip())
    return slug[:FEATURE_NAME_MAX_LENGTH]


def _normalize(document: Any, source: Path) -> SpecDocument:
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise StoreError(
            f"Spec document {source} must be a mapping, got {type(document).__name__}"
        )
    features = document.setdefault("features", {})
    if features is None:
        document["features"] = {}
    elif not isinstance(features, dict):
        raise StoreError(f"Spec document {source}: 'features' must be a mapping")
    workflows = document.setdefault("workflows", [])
    if workflows is None:
        document["workflows"] = []
    elif not isinstance(workflows, list):
        raise StoreError(f"Spec document {source}: 'workflows' must be a list")
    return document


class SpecStore:
    """
    Read and rewrite the YAML spec document.

    Example:
        >>> store = SpecStore(Path(".evolvedash/spec.yaml"))
        >>> store.initialize()
        >>> store.write_spec(lambda doc: doc["features"].update({"clock": {"name": "clock"}}))
        >>> "clock" in store.read_spec()["features"]
        True
    """

    def __init__(self, spec_path: Path) -> None:
        self.spec_path = spec_path

    def exists(self) -> bool:
        """Whether the spec file is present."""
        return self.spec_path.is_file()

    def initialize(self, app_name: str | None = None) -> bool:
        """
        Create a default spec document if none exists.

        Args:
            app_name: Application name recorded in the new document

        Returns:
            True if a document was created, False if one already existed
        """
        if self.exists():
            return False
        document = default_document(app_name) if app_name else default_document()
        self._write(document)
        logger.info("Created spec document at %s", self.spec_path)
        return True

    def read_spec(self) -> SpecDocument:
        """
        Load and parse the spec document.

        Returns:
            The parsed document, with `features` and `workflows` present

        Raises:
            StoreError: If the file is missing, unreadable, or not valid YAML
        """
        try:
            with open(self.spec_path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise StoreError(f"Spec document not found: {self.spec_path}") from e
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise StoreError(f"Failed to parse spec document {self.spec_path}: {e}") from e
        except OSError as e:
            raise StoreError(f"Failed to read spec document {self.spec_path}: {e}") from e

        return _normalize(raw, self.spec_path)

    def write_spec(self, mutator: SpecMutator) -> SpecDocument:
        """
        Apply one mutation to the spec document and rewrite it atomically.

        The mutator receives the freshly read document. It may modify it in
        place (returning None) or return a replacement mapping.

        Args:
            mutator: Function applying the change

        Returns:
            The document as written

        Raises:
            StoreError: If the document can't be read, the result is not a
                valid document, or the rewrite fails
        """
        document = self.read_spec()
        result = mutator(document)
        if result is not None:
            document = result
        document = _normalize(document, self.spec_path)
        self._write(document)
        return document

    def _write(self, document: SpecDocument) -> None:
        try:
            content = yaml.safe_dump(
                document,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                width=120,
            )
        except yaml.YAMLError as e:
            raise StoreError(f"Spec document is not serializable: {e}") from e

        directory = self.spec_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=directory, prefix=".spec_", suffix=".yaml.tmp"
            )
        except OSError as e:
            raise StoreError(f"Failed to write spec document {self.spec_path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())

            # Atomic rename
            os.replace(temp_path, self.spec_path)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StoreError(f"Failed to write spec document {self.spec_path}: {e}") from e

        logger.debug("Wrote spec document %s", self.spec_path)

    # ------------------------------------------------------------------
    # Feature and workflow helpers
    # ------------------------------------------------------------------

    def add_feature(self, key: str, metadata: dict[str, Any]) -> SpecDocument:
        """Add (or replace) a feature entry."""

        def mutate(document: SpecDocument) -> None:
            document["features"][key] = copy.deepcopy(metadata)

        return self.write_spec(mutate)

    def update_feature(self, key: str, **fields: Any) -> SpecDocument:
        """
        Merge fields into an existing feature entry.

        A feature stored as a plain string description is promoted to a
        mapping with a `description` key first.

        Raises:
            StoreError: If the feature key is not in the document
        """

        def mutate(document: SpecDocument) -> None:
            features = document["features"]
            if key not in features:
                raise StoreError(f"Feature '{key}' not found in spec document")
            entry = features[key]
            if not isinstance(entry, dict):
                entry = {"description": entry}
            entry.update(fields)
            features[key] = entry

        return self.write_spec(mutate)

    def list_workflows(self) -> list[dict[str, Any]]:
        """
        Workflows in the order they were added.

        Raises:
            StoreError: If the document can't be read
        """
        workflows: list[dict[str, Any]] = self.read_spec()["workflows"]
        return workflows

    def add_workflow(
        self,
        name: str,
        description: str,
        schedule: str | None = None,
        action: str | dict[str, Any] | list[Any] | None = None,
    ) -> dict[str, Any]:
        """
        Append a workflow definition.

        Args:
            name: Workflow name
            description: What the workflow does
            schedule: Cron-style schedule; manual trigger when omitted
            action: A string, a single action mapping, or a list of actions

        Returns:
            The workflow as stored
        """
        workflow: dict[str, Any] = {
            "id": f"workflow_{secrets.token_hex(6)}",
            "name": name.strip(),
            "description": description.strip(),
            "created_at": datetime.now(timezone.utc).isoformat(),
            "status": "active",
        }

        if schedule and schedule.strip():
            workflow["trigger"] = {"type": "schedule", "schedule": schedule.strip()}
        else:
            workflow["trigger"] = {"type": "manual"}

        if isinstance(action, str) and action.strip():
            workflow["actions"] = [{"type": "custom", "action": action.strip()}]
        elif isinstance(action, list):
            workflow["actions"] = copy.deepcopy(action)
        elif isinstance(action, dict):
            workflow["actions"] = [copy.deepcopy(action)]
        else:
            workflow["actions"] = [{"type": "placeholder", "action": "No action specified"}]

        def mutate(document: SpecDocument) -> None:
            document["workflows"].append(workflow)

        self.write_spec(mutate)
        logger.info("Added workflow %s (%s)", workflow["id"], workflow["name"])
        return workflow
