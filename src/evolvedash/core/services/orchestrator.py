"""
Feature request orchestrator.

Drives one feature request from intake to a terminal state:

1. validate the description (nothing is persisted for invalid input)
2. record a pending row in the request log
3. declare the feature in the spec document
4. run the generator
5. record the outcome: row, generation manifest, feature registry, spec entry

Generator failures are outcomes, not errors: the request is marked failed
and the caller gets a failure payload. Only validation errors and a spec
document that can't be written at step 3 are raised.
"""

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from evolvedash.core.discovery import FeatureRegistry, GenerationManifest
from evolvedash.core.errors import GeneratorError, NotFoundError, StoreError, ValidationError
from evolvedash.core.oplog import OperationLog
from evolvedash.core.requests import FeatureRequest, FeatureRequestLog, FeatureRequestStatus
from evolvedash.core.services.generator import GeneratorService
from evolvedash.core.spec import SpecStore, feature_name_from_description

logger = logging.getLogger(__name__)

DEFAULT_MAX_DESCRIPTION_LENGTH = 2000


class ProcessingResult(BaseModel):
    """What happened when the generator ran."""

    success: bool
    message: str
    generated_files: list[str] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubmitResult(BaseModel):
    """Response to a feature request submission."""

    feature_request: FeatureRequest
    processing: ProcessingResult

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def spec_feature_key(request_id: str) -> str:
    """Key under which a request is recorded in the spec document."""
    return f"feature_{request_id}"


class RequestOrchestrator:
    """
    Process feature requests end to end.

    Example:
        >>> orchestrator = RequestOrchestrator(
        ...     request_log, spec_store, generator, registry, manifest, oplog
        ... )
        >>> result = orchestrator.submit("Add a clock panel")
        >>> result.feature_request.status
        <FeatureRequestStatus.COMPLETED: 'completed'>
    """

    def __init__(
        self,
        request_log: FeatureRequestLog,
        spec_store: SpecStore,
        generator: GeneratorService,
        registry: FeatureRegistry,
        manifest: GenerationManifest,
        oplog: OperationLog,
        max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH,
    ) -> None:
        self.request_log = request_log
        self.spec_store = spec_store
        self.generator = generator
        self.registry = registry
        self.manifest = manifest
        self.oplog = oplog
        self.max_description_length = max_description_length

    def validate(self, description: object) -> str:
        """
        Check a description and return it trimmed.

        The length limit applies to the text as submitted, surrounding
        whitespace included.

        Raises:
            ValidationError: If it is not a string, is blank, or is too long
        """
        if description is None:
            description = ""
        if not isinstance(description, str):
            self.oplog.add("warning", "Rejected feature request with non-text description")
            raise ValidationError("Feature description must be a string")
        text = description.strip()
        if not text:
            self.oplog.add("warning", "Rejected feature request with empty description")
            raise ValidationError("Feature description is required")
        if len(description) > self.max_description_length:
            self.oplog.add(
                "warning",
                "Rejected feature request with oversized description",
                length=len(description),
            )
            raise ValidationError(
                f"Feature description must be at most {self.max_description_length} characters"
            )
        return text

    def submit(self, description: str) -> SubmitResult:
        """
        Record a feature request and run the generator for it.

        Args:
            description: Natural-language request text

        Returns:
            SubmitResult with the final request row and the processing outcome

        Raises:
            ValidationError: If the description is rejected (no row is created)
            StoreError: If the spec document can't be updated before generation
        """
        text = self.validate(description)

        request_id = self.request_log.create(text)
        self.oplog.add("info", "Feature request received", request_id=request_id)

        key = spec_feature_key(request_id)
        try:
            self.spec_store.add_feature(
                key,
                {
                    "name": feature_name_from_description(text),
                    "description": text,
                    "status": FeatureRequestStatus.PENDING.value,
                    "created_at": datetime.now(timezone.utc).isoformat(),
                    "type": "user_requested",
                    "request_id": request_id,
                },
            )
        except StoreError as e:
            self.oplog.add(
                "error", "Failed to record feature in spec", request_id=request_id, error=str(e)
            )
            raise

        self.oplog.add(
            "info", "Generating feature", request_id=request_id, generator=self.generator.name
        )
        try:
            outcome = self.generator.generate(description)
        except GeneratorError as e:
            processing = self._record_failure(request_id, key, str(e))
        else:
            processing = self._record_success(request_id, key, outcome.generated_files)

        feature_request = self.request_log.get(request_id)
        if feature_request is None:
            raise NotFoundError("Feature request", request_id)
        return SubmitResult(feature_request=feature_request, processing=processing)

    def _record_success(self, request_id: str, key: str, files: list[str]) -> ProcessingResult:
        self.request_log.update(request_id, FeatureRequestStatus.COMPLETED, generated_files=files)

        if files:
            try:
                self.manifest.record(files)
            except OSError as e:
                self.oplog.add(
                    "warning",
                    "Failed to update generation manifest",
                    request_id=request_id,
                    error=str(e),
                )
        self.registry.refresh()

        self._mark_spec(
            request_id,
            key,
            status=FeatureRequestStatus.COMPLETED.value,
            completed_at=datetime.now(timezone.utc).isoformat(),
            generated_files=list(files),
        )

        self.oplog.add(
            "info", "Feature request completed", request_id=request_id, generated_files=files
        )
        return ProcessingResult(
            success=True,
            message=f"Generated {len(files)} file(s)",
            generated_files=files,
        )

    def _record_failure(self, request_id: str, key: str, error: str) -> ProcessingResult:
        self.request_log.update(request_id, FeatureRequestStatus.FAILED, error=error)
        self._mark_spec(request_id, key, status=FeatureRequestStatus.FAILED.value, error=error)
        self.oplog.add("error", "Feature request failed", request_id=request_id, error=error)
        return ProcessingResult(success=False, message=f"Generation failed: {error}")

    def _mark_spec(self, request_id: str, key: str, **fields: object) -> None:
        # The request row is already terminal; a spec write failure here is reported, not raised
        try:
            self.spec_store.update_feature(key, **fields)
        except StoreError as e:
            self.oplog.add(
                "error",
                "Failed to update feature status in spec",
                request_id=request_id,
                error=str(e),
            )
