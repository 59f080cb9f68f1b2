#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP, no remote data store).

Usage:
  ENV=dev python3 scripts/book_local.py

Drives one BookingWizard from the project wiring with typed commands and
prints the wizard result, the current step and the price after each one.
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cleanbook.application.ports.address_source import AddressCandidate
from cleanbook.application.use_cases.booking_wizard import BookingWizard, WizardResult
from cleanbook.application.use_cases.draft_machine import (
    AcceptRecommendation,
    SelectCategory,
    SelectCrewSize,
    SelectDuration,
    SelectPropertySize,
    SelectService,
    SetContact,
    SetPaymentMethod,
    SetScheduledDate,
    SetScheduledTime,
    SetUsesOwnMaterials,
    SetWindowPanelCount,
    ToggleAddon,
)
from cleanbook.application.utils.scheduling import parse_time_slot
from cleanbook.domain.entities.booking_draft import Category, Contact, PaymentMethod, PropertySize
from cleanbook.wiring.dependencies import get_container


HELP = """Commands:
  /services                 list services and add-ons
  /category <regular|deep|packages|specialized>
  /service <id>             /size <small|medium|large|villa>
  /crew <1-4>               /hours <h>        /accept (take recommendation)
  /materials <on|off>       /panels <n>       /addon <id>
  /date <YYYY-MM-DD>        /time <HH:MM>
  /contact <name>;<phone>;<address>
  /pay <cash|card>
  /next  /back  /signin <user_id>  /quit"""


def _print_result(result: WizardResult | None) -> None:
    if result is None:
        print("(no change)")
        return
    state = result.state
    print(f"\n--- {result.action} ---")
    if result.message:
        print(f"message: {result.message}")
    print(f"step: {int(state.step)} ({state.step.name.lower()})")
    draft = state.draft
    if draft.service is not None:
        print(f"service: {draft.service.id} {draft.service.name}")
    if state.recommendation is not None:
        rec = state.recommendation
        print(f"recommended: {rec.recommended_crew_size} cleaners, {rec.recommended_duration_hours}h")
    if state.price is not None:
        price = state.price
        print(f"price: base={price.base_price} addons={price.addons_total} vat={price.vat} total={price.total}")
    if state.signup_prompt:
        print("(sign up required: use /signin <user_id>)")
    if state.order_id:
        print(f"order: {state.order_id}")


async def _handle(wizard: BookingWizard, identity, cmd: str, arg: str) -> WizardResult | None:
    if cmd == "/category":
        return wizard.dispatch(SelectCategory(Category(arg)))
    if cmd == "/service":
        return wizard.dispatch(SelectService(int(arg)))
    if cmd == "/size":
        return wizard.dispatch(SelectPropertySize(PropertySize(arg)))
    if cmd == "/crew":
        return wizard.dispatch(SelectCrewSize(int(arg)))
    if cmd == "/hours":
        return wizard.dispatch(SelectDuration(float(arg)))
    if cmd == "/accept":
        return wizard.dispatch(AcceptRecommendation())
    if cmd == "/materials":
        return wizard.dispatch(SetUsesOwnMaterials(arg == "on"))
    if cmd == "/panels":
        return wizard.dispatch(SetWindowPanelCount(int(arg)))
    if cmd == "/addon":
        return wizard.dispatch(ToggleAddon(int(arg)))
    if cmd == "/date":
        return wizard.dispatch(SetScheduledDate(date.fromisoformat(arg)))
    if cmd == "/time":
        return wizard.dispatch(SetScheduledTime(parse_time_slot(arg) or arg))
    if cmd == "/contact":
        name, phone, address = (part.strip() for part in arg.split(";", 2))
        wizard.dispatch(SetContact(Contact(name=name, phone=phone)))
        return wizard.select_address(AddressCandidate(label=address))
    if cmd == "/pay":
        return wizard.dispatch(SetPaymentMethod(PaymentMethod(arg)))
    if cmd == "/next":
        return await wizard.next_step()
    if cmd == "/back":
        return wizard.back()
    if cmd == "/signin":
        identity.sign_in(arg or "local_user_1")
        return wizard.refresh_session()
    print(f"Unknown command: {cmd}")
    return None


async def main() -> None:
    container = get_container()
    wizard: BookingWizard = container["wizard"]  # type: ignore[assignment]
    identity = container["identity"]

    print("\nLocal Booking Harness")
    print("-" * 60)
    print(HELP)
    print("-" * 60)
    _print_result(await wizard.open())

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break
        if not line:
            continue

        cmd, _, arg = line.partition(" ")
        cmd, arg = cmd.lower(), arg.strip()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            break
        if cmd == "/help":
            print(HELP)
            continue
        if cmd == "/services":
            catalog = wizard.catalog
            if catalog is None:
                _print_result(await wizard.retry())
                continue
            for s in catalog.services:
                print(f"  {s.id:>3} [{s.category}] {s.name} ({s.pricing_mode.value}, {s.base_price})")
            for a in catalog.addons:
                print(f"  +{a.id:>2} {a.name} ({a.price})")
            continue

        try:
            result = await _handle(wizard, identity, cmd, arg)
        except ValueError as e:
            print(f"Invalid input: {e}")
            continue
        _print_result(result)

    wizard.close()


if __name__ == "__main__":
    asyncio.run(main())
