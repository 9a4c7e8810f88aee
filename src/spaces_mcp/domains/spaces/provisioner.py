"""Space lifecycle orchestration.

Creation is a fixed plan of steps (namespace, quota, limit range), each
with an optional compensating action. If a step fails, completed steps are
compensated in reverse order before the original error propagates, so a
failed create never leaves a namespace without quota enforcement behind.
Operations on the same space id are serialized; different spaces proceed
concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from spaces_mcp.auth.identity import Identity, ensure_access
from spaces_mcp.domains.spaces.models import (
    Space,
    SpaceCreate,
    SpaceStatus,
    namespace_for,
    validate_description,
    validate_space_name,
)
from spaces_mcp.domains.spaces.tiers import TierCatalog
from spaces_mcp.models.quota import LimitRangeItem, QuotaUsage
from spaces_mcp.utils.errors import (
    AccessDeniedError,
    NotFoundError,
    ResourceConflict,
    ResourceNotFound,
)
from spaces_mcp.utils.labels import SpacesAnnotations, SpacesLabels

if TYPE_CHECKING:
    from spaces_mcp.clients.gateway import ClusterGateway
    from spaces_mcp.domains.spaces.store import SpaceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisioningStep:
    """One cluster call in a provisioning plan."""

    name: str
    run: Callable[[], Awaitable[None]]
    compensate: Callable[[], Awaitable[None]] | None = None


async def _compensate(completed: Sequence[ProvisioningStep]) -> None:
    for step in reversed(completed):
        if step.compensate is None:
            continue
        try:
            await step.compensate()
            logger.info(f"Compensated step '{step.name}'")
        except Exception as e:
            logger.warning(f"Compensation for step '{step.name}' failed: {e}")


async def _settle_and_compensate(
    in_flight: asyncio.Future[None],
    step: ProvisioningStep,
    completed: list[ProvisioningStep],
) -> None:
    # The API call keeps running in its worker thread after cancellation;
    # wait for it so a late success is compensated too.
    await asyncio.wait({in_flight})
    if not in_flight.cancelled() and in_flight.exception() is None:
        completed.append(step)
    await _compensate(completed)


async def run_steps(steps: Sequence[ProvisioningStep]) -> None:
    """Run a plan in order, compensating completed steps on failure.

    On cancellation the in-flight step is allowed to settle, then every
    step that completed is compensated before ``CancelledError`` is
    re-raised. The original failure always propagates unchanged.
    """
    completed: list[ProvisioningStep] = []
    for step in steps:
        in_flight = asyncio.ensure_future(step.run())
        try:
            await asyncio.shield(in_flight)
        except asyncio.CancelledError:
            logger.warning(f"Provisioning cancelled during step '{step.name}', cleaning up")
            await asyncio.shield(_settle_and_compensate(in_flight, step, list(completed)))
            raise
        except Exception as e:
            logger.warning(f"Provisioning step '{step.name}' failed: {e}")
            await _compensate(completed)
            raise
        completed.append(step)


class _KeyedLocks:
    """Per-key asyncio locks, released from the registry when idle."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class SpaceProvisioner:
    """Creates, removes and inspects spaces on the cluster.

    Every operation checks that the caller owns the space (or is an
    administrator) before any cluster call is made.
    """

    def __init__(
        self,
        gateway: ClusterGateway,
        store: SpaceStore,
        tiers: TierCatalog | None = None,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._tiers = tiers or TierCatalog()
        self._locks = _KeyedLocks()

    async def _get_owned(self, identity: Identity, space_id: str) -> Space:
        space = await self._store.get(space_id)
        if space is None:
            raise NotFoundError("Space", space_id)
        ensure_access(identity, space)
        return space

    def _creation_plan(
        self,
        space: Space,
        quota: dict[str, str],
        limits: list[LimitRangeItem],
    ) -> list[ProvisioningStep]:
        namespace = space.namespace
        annotations = {
            SpacesAnnotations.DISPLAY_NAME: space.name,
            SpacesAnnotations.REQUESTER: space.owner_id,
        }
        if space.description:
            annotations[SpacesAnnotations.DESCRIPTION] = space.description

        async def create_namespace() -> None:
            await self._gateway.create_namespace(
                namespace,
                labels=SpacesLabels.space_labels(space.id, space.tier.value),
                annotations=annotations,
            )

        async def delete_namespace() -> None:
            try:
                await self._gateway.delete_namespace(namespace)
            except ResourceNotFound:
                pass

        async def create_quota() -> None:
            await self._gateway.create_resource_quota(namespace, quota)

        async def create_limit_range() -> None:
            await self._gateway.create_limit_range(namespace, limits)

        # Quota and limit range are removed together with the namespace.
        return [
            ProvisioningStep("namespace", create_namespace, delete_namespace),
            ProvisioningStep("resource-quota", create_quota),
            ProvisioningStep("limit-range", create_limit_range),
        ]

    async def create(
        self,
        identity: Identity,
        request: SpaceCreate,
        space_id: str | None = None,
        owner_id: str | None = None,
    ) -> Space:
        """Create a space and provision its namespace, quota and limit range.

        Args:
            identity: Verified caller.
            request: Name, description, tier and optional explicit specs.
                Empty quota or limit range specs fall back to the tier presets.
            space_id: Identifier assigned by the record store; generated when omitted.
            owner_id: Owner to create the space for. Only administrators may
                create spaces for someone else.

        Returns:
            The ACTIVE space.

        Raises:
            AccessDeniedError: If a non-admin creates a space for another user
                or re-creates an id recorded for someone else.
            ValidationError: If the name or description is invalid.
            ResourceConflict: If the space or its namespace already exists.
            ClusterError: If any cluster step fails; the namespace is cleaned up.
        """
        owner = owner_id or identity.subject
        if owner != identity.subject and not identity.is_admin:
            raise AccessDeniedError(identity.subject, space_id or "<new>")

        validate_space_name(request.name)
        validate_description(request.description)

        space_id = space_id or str(uuid.uuid4())
        namespace = namespace_for(space_id)
        quota = dict(request.quota) or self._tiers.quota_for(request.tier)
        limits = list(request.limit_range) or self._tiers.limit_range_for(request.tier)

        async with self._locks.hold(space_id):
            existing = await self._store.get(space_id)
            if existing is not None:
                # A deleted id still belongs to its recorded owner
                ensure_access(identity, existing)
            if existing is not None and existing.status is not SpaceStatus.DELETED:
                raise ResourceConflict(
                    "Space",
                    namespace=namespace,
                    action="create",
                    cause=f"space {space_id} already exists ({existing.status.value})",
                )

            space = Space(
                id=space_id,
                owner_id=owner,
                name=request.name,
                description=request.description,
                tier=request.tier,
                namespace=namespace,
                status=SpaceStatus.PENDING,
            )
            await self._store.save(space)
            logger.info(f"Provisioning space {space_id} in namespace {namespace}")

            try:
                await run_steps(self._creation_plan(space, quota, limits))
            except BaseException:
                await asyncio.shield(self._discard_pending(space_id, existing))
                raise

            space = space.touch(SpaceStatus.ACTIVE)
            await self._store.save(space)
            logger.info(f"Space {space_id} is ACTIVE")
            return space

    async def _discard_pending(self, space_id: str, previous: Space | None) -> None:
        if previous is not None:
            await self._store.save(previous)
        else:
            await self._store.delete(space_id)

    async def remove(self, identity: Identity, space_id: str) -> Space:
        """Delete a space's namespace; quota and limit range go with it.

        Deleting a namespace that is already gone counts as success.
        Dependent resources are the record store's concern, not checked here.

        Returns:
            The space in DELETED status.
        """
        async with self._locks.hold(space_id):
            space = await self._get_owned(identity, space_id)
            if space.status is SpaceStatus.DELETED:
                return space

            previous = space
            space = space.touch(SpaceStatus.DELETING)
            await self._store.save(space)

            try:
                await self._gateway.delete_namespace(space.namespace)
            except ResourceNotFound:
                logger.info(f"Namespace {space.namespace} already absent")
            except BaseException:
                await asyncio.shield(self._store.save(previous.touch()))
                raise

            space = space.touch(SpaceStatus.DELETED)
            await self._store.save(space)
            logger.info(f"Space {space_id} deleted")
            return space

    async def get_quota_usage(self, identity: Identity, space_id: str) -> QuotaUsage | None:
        """Current quota usage, or None while the cluster has not reported it."""
        space = await self._get_owned(identity, space_id)
        return await self._gateway.get_resource_quota_usage(space.namespace)

    async def get(self, identity: Identity, space_id: str) -> Space:
        """Get a space the caller may access."""
        return await self._get_owned(identity, space_id)

    async def list_spaces(self, identity: Identity, include_deleted: bool = False) -> list[Space]:
        """List the caller's spaces; administrators see every space."""
        owner = None if identity.is_admin else identity.subject
        spaces = await self._store.list(owner)
        if include_deleted:
            return spaces
        return [s for s in spaces if s.status is not SpaceStatus.DELETED]

    async def update(
        self,
        identity: Identity,
        space_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> Space:
        """Change the display name or description.

        The namespace derives from the id, so no cluster call is needed.
        """
        if name is not None:
            validate_space_name(name)
        validate_description(description)

        async with self._locks.hold(space_id):
            space = await self._get_owned(identity, space_id)
            if space.status in (SpaceStatus.DELETING, SpaceStatus.DELETED):
                raise NotFoundError("Space", space_id)

            changes: dict[str, object] = {}
            if name is not None:
                changes["name"] = name
            if description is not None:
                changes["description"] = description
            if not changes:
                return space

            space = space.model_copy(update=changes).touch()
            await self._store.save(space)
            return space
