from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from cleanbook.application.exceptions import (
    CatalogUnavailable,
    DraftValidationError,
    SourceUnavailable,
    SubmissionFailed,
)
from cleanbook.application.ports.address_source import AddressCandidate, AddressSourcePort
from cleanbook.application.ports.identity_source import IdentitySourcePort
from cleanbook.application.ports.notifier import NotifierPort
from cleanbook.application.ports.order_sink import OrderSinkPort
from cleanbook.application.use_cases.catalog_cache import CatalogCache
from cleanbook.application.use_cases.draft_machine import (
    Action,
    SetContact,
    advance,
    confirm,
    derive,
    go_back,
    reduce,
    to_order_record,
    validate_through,
)
from cleanbook.application.use_cases.guest_bridge import GuestDraftBridge
from cleanbook.application.use_cases.pricing import compute_price_breakdown
from cleanbook.application.utils.scheduling import local_today
from cleanbook.core.config import settings
from cleanbook.domain.entities.booking_draft import AddressRef, Contact, WizardStep
from cleanbook.domain.entities.catalog import CatalogSnapshot
from cleanbook.domain.entities.order import OrderRecord
from cleanbook.domain.entities.session import Session
from cleanbook.domain.entities.wizard_state import WizardState


MIN_ADDRESS_QUERY_LENGTH = 3


@dataclass(frozen=True)
class WizardResult:
    # "opened", "resumed", "updated", "refused", "advanced", "back", "signup_required",
    # "submitted", "submission_failed", "catalog_unavailable", "ignored"
    action: str
    state: WizardState
    message: str | None = None
    step: int | None = None


class BookingWizard:
    """
    One booking session: catalog, draft state machine, guest hand-off and submission.

    The wizard is the only owner of the draft. Every user gesture becomes a
    single ``dispatch``/``next_step``/``back``/``submit`` call that returns a
    WizardResult; validation problems come back as ``refused`` results and
    never raise.
    """

    def __init__(
        self,
        catalog: CatalogCache,
        identity: IdentitySourcePort,
        order_sink: OrderSinkPort,
        draft_bridge: GuestDraftBridge,
        reorder_bridge: GuestDraftBridge | None = None,
        notifier: NotifierPort | None = None,
        address_source: AddressSourcePort | None = None,
        timezone: str | None = None,
        today: Callable[[], date] | None = None,
        now: Callable[[], datetime] | None = None,
        confirmation_delay: float | None = None,
        currency: str | None = None,
    ) -> None:
        self._catalog = catalog
        self._identity = identity
        self._order_sink = order_sink
        self._draft_bridge = draft_bridge
        self._reorder_bridge = reorder_bridge
        self._notifier = notifier
        self._address_source = address_source
        tz_name = timezone or settings.BUSINESS_TIMEZONE
        self._today = today or (lambda: local_today(tz_name))
        self._now = now or (lambda: datetime.now(ZoneInfo(tz_name)))
        self._confirmation_delay = (
            settings.CONFIRMATION_DELAY_SECONDS if confirmation_delay is None else confirmation_delay
        )
        self._currency = currency or settings.CURRENCY

        self._state = WizardState()
        self._catalog_snapshot: CatalogSnapshot | None = None
        self._last_session: Session | None = None
        self._resume_due = False
        self._resume_attempted = False
        self._intercepted = False
        self._submitting = False
        self._closed = False
        self._background: set[asyncio.Task] = set()
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def catalog(self) -> CatalogSnapshot | None:
        return self._catalog_snapshot

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def closed(self) -> bool:
        return self._closed

    # --- lifecycle -------------------------------------------------------------

    async def open(self) -> WizardResult:
        """Load the catalog, then resume a pending draft if a session just appeared."""
        if self._closed:
            return self._ignored_closed()
        self._observe_session()
        try:
            snapshot = await self._catalog.load()
        except asyncio.CancelledError:
            if not self._closed:
                raise
            return self._ignored_closed()
        except CatalogUnavailable as e:
            self._logger.warning("Catalog unavailable", extra={"error": str(e)})
            return self._catalog_missing()

        if self._closed:
            return self._ignored_closed()
        self._catalog_snapshot = snapshot
        resumed = self._maybe_resume()
        if resumed is not None:
            return resumed
        return WizardResult(action="opened", state=self._state)

    async def retry(self) -> WizardResult:
        return await self.open()

    def refresh_session(self) -> WizardResult | None:
        """Call when the identity source reports a change."""
        session = self._observe_session()
        if session.is_authenticated and self._state.signup_prompt:
            self._state = replace(self._state, signup_prompt=False)
        if self._catalog_snapshot is None:
            # open() resumes once the catalog has loaded.
            return None
        return self._maybe_resume()

    def close(self) -> None:
        """Tear down: in-flight catalog fetches are cancelled and never applied."""
        if self._closed:
            return
        self._closed = True
        self._catalog.cancel()

    async def teardown(self) -> str:
        """Show the confirmation for a while, then close. Returns the next route."""
        if self._state.step is not WizardStep.CONFIRMATION:
            raise DraftValidationError("Booking is not confirmed yet", self._state.step)
        await asyncio.sleep(self._confirmation_delay)
        self.close()
        return settings.ORDER_HISTORY_ROUTE

    # --- user gestures ---------------------------------------------------------

    def dispatch(self, action: Action) -> WizardResult:
        if self._closed:
            return self._ignored_closed()
        if self._catalog_snapshot is None:
            return self._catalog_missing()
        if self._state.step is WizardStep.CONFIRMATION:
            return self._refuse(DraftValidationError("Booking is already confirmed", WizardStep.CONFIRMATION))
        try:
            self._state = reduce(self._state, action, self._catalog_snapshot, self._today())
        except DraftValidationError as e:
            return self._refuse(e)
        return WizardResult(action="updated", state=self._state)

    async def next_step(self) -> WizardResult:
        if self._closed:
            return self._ignored_closed()
        if self._catalog_snapshot is None:
            return self._catalog_missing()

        step = self._state.step
        if step is WizardStep.CONTACT_AND_PAYMENT:
            return await self.submit()
        if step is WizardStep.CONFIRMATION:
            return self._refuse(DraftValidationError("Booking is already confirmed", step))

        today = self._today()
        try:
            validate_through(self._state.draft, step, today)
        except DraftValidationError as e:
            return self._refuse(e)

        session = self._settled_session()
        if step is WizardStep.SCHEDULING and not session.is_authenticated:
            return self._intercept_guest(step)

        try:
            self._state = advance(self._state, today)
        except DraftValidationError as e:
            return self._refuse(e)
        self._logger.info("Wizard advanced", extra={"step": int(self._state.step)})
        return WizardResult(action="advanced", state=self._state)

    def back(self) -> WizardResult:
        if self._closed:
            return self._ignored_closed()
        self._state = go_back(self._state)
        return WizardResult(action="back", state=self._state)

    async def submit(self) -> WizardResult:
        """Create the order exactly once; duplicate calls while in flight are ignored."""
        if self._closed:
            return self._ignored_closed()
        if self._submitting:
            self._logger.info("Duplicate submit ignored", extra={"step": int(self._state.step)})
            return WizardResult(action="ignored", state=self._state, message="Submission already in progress")
        if self._state.step is not WizardStep.CONTACT_AND_PAYMENT:
            return self._refuse(DraftValidationError("Please complete the previous steps first", self._state.step))

        draft = self._state.draft
        try:
            validate_through(draft, WizardStep.CONTACT_AND_PAYMENT, self._today())
        except DraftValidationError as e:
            return self._refuse(e)

        session = self._settled_session()
        if not session.is_authenticated:
            return self._intercept_guest(WizardStep.CONTACT_AND_PAYMENT)

        order = to_order_record(
            draft,
            customer_id=session.user_id,
            price=compute_price_breakdown(draft),
            created_at=self._now(),
            currency=self._currency,
        )

        self._submitting = True
        try:
            order_id = await self._order_sink.create(order)
        except (SubmissionFailed, SourceUnavailable) as e:
            self._logger.warning("Order submission failed", extra={"error": str(e)})
            return WizardResult(
                action="submission_failed",
                state=self._state,
                message="Error creating booking. Please try again.",
            )
        finally:
            self._submitting = False

        self._state = confirm(self._state, order_id)
        self._logger.info("Order created", extra={"order_id": order_id, "service_id": order.service_id})
        self._schedule_notification(order_id, replace(order, order_id=order_id))
        return WizardResult(action="submitted", state=self._state)

    async def resolve_address(self, query: str) -> list[AddressCandidate]:
        if self._address_source is None or len((query or "").strip()) < MIN_ADDRESS_QUERY_LENGTH:
            return []
        try:
            return await self._address_source.resolve(query.strip())
        except SourceUnavailable as e:
            self._logger.warning("Address lookup failed", extra={"error": str(e)})
            return []

    def select_address(self, candidate: AddressCandidate) -> WizardResult:
        contact = self._state.draft.contact or Contact()
        address = AddressRef(
            label=candidate.label,
            address_id=candidate.address_id,
            latitude=candidate.latitude,
            longitude=candidate.longitude,
        )
        return self.dispatch(SetContact(replace(contact, address=address)))

    # --- internals -------------------------------------------------------------

    def _observe_session(self) -> Session:
        session = self._identity.current_session()
        was_authenticated = self._last_session is not None and self._last_session.is_authenticated
        if session.is_authenticated and not was_authenticated and not self._resume_attempted:
            self._resume_due = True
        self._last_session = session
        return session

    def _settled_session(self) -> Session:
        """Current session; a sign-in after interception also consumes the persisted draft."""
        session = self._observe_session()
        if self._intercepted and session.is_authenticated:
            self._maybe_resume()
        return session

    def _maybe_resume(self) -> WizardResult | None:
        if not self._resume_due or self._catalog_snapshot is None:
            return None
        self._resume_due = False
        self._resume_attempted = True

        if self._intercepted:
            # Same session that was intercepted: the in-memory draft is newer than the snapshot.
            self._intercepted = False
            self._draft_bridge.discard()
            self._state = replace(self._state, signup_prompt=False)
            return WizardResult(action="resumed", state=self._state, step=int(self._state.step))

        today = self._today()
        resumed = self._draft_bridge.try_resume_draft(self._catalog_snapshot, today)
        if resumed is None and self._reorder_bridge is not None:
            resumed = self._reorder_bridge.try_resume_draft(self._catalog_snapshot, today)
        if resumed is None:
            return None

        draft, step = resumed
        self._state = derive(WizardState(step=step, draft=draft))
        return WizardResult(action="resumed", state=self._state, step=int(step))

    def _intercept_guest(self, step: WizardStep) -> WizardResult:
        self._draft_bridge.persist_draft(self._state.draft, step)
        self._intercepted = True
        self._resume_attempted = False
        self._state = replace(self._state, signup_prompt=True)
        self._logger.info("Guest intercepted before contact step", extra={"step": int(step)})
        return WizardResult(
            action="signup_required",
            state=self._state,
            message="Please sign up to continue your booking",
            step=int(step),
        )

    def _refuse(self, error: DraftValidationError) -> WizardResult:
        self._logger.info("Transition refused", extra={"step": error.step, "reason": error.message})
        return WizardResult(action="refused", state=self._state, message=error.message, step=error.step)

    def _ignored_closed(self) -> WizardResult:
        return WizardResult(action="ignored", state=self._state, message="Booking wizard is closed")

    def _catalog_missing(self) -> WizardResult:
        return WizardResult(
            action="catalog_unavailable",
            state=self._state,
            message="Services could not be loaded. Please try again.",
        )

    def _schedule_notification(self, order_id: str, order: OrderRecord) -> None:
        if self._notifier is None:
            return
        task = asyncio.ensure_future(self._notify(order_id, order))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _notify(self, order_id: str, order: OrderRecord) -> None:
        try:
            await self._notifier.new_order(order_id, order)
        except Exception as e:
            self._logger.warning("Admin notification failed", extra={"order_id": order_id, "error": str(e)})
