from datetime import date
from urllib.parse import quote

from app.core.config import settings


def _money(amount: int) -> str:
    return f"{settings.CURRENCY_SYMBOL}{amount:,}"


def build_booking_message(*, package_title: str, destination: str, contact_name: str, contact_phone: str,
                          travel_date: date, number_of_people: int, total_amount: int, advance_amount: int,
                          members: list[tuple[str, str]], group_name: str = "") -> str:
    lines = [
        "*New Booking Request!*",
        "",
        f"*Package:* {package_title}",
        f"*Destination:* {destination}",
        f"*Date:* {travel_date.isoformat()}",
        f"*Contact:* {contact_name} ({contact_phone})",
    ]
    if group_name:
        lines.append(f"*Group:* {group_name}")
    lines += [
        f"*Total People:* {number_of_people}",
        "",
        "*Payment Details:*",
        f"Total Amount: {_money(total_amount)}",
        f"Advance: {_money(advance_amount)}",
        f"Remaining Balance: {_money(total_amount - advance_amount)}",
        "",
        f"*Travellers ({len(members)}/{number_of_people}):*",
    ]
    lines += [f"{i}. {name} - {phone}" for i, (name, phone) in enumerate(members, 1)] or ["None"]
    lines += ["", "Please confirm this booking!"]
    return "\n".join(lines)


def build_whatsapp_link(message: str, phone: str | None = None) -> str:
    """wa.me deep link that opens a chat with the admin number, message prefilled."""
    number = "".join(ch for ch in (phone or settings.ADMIN_WHATSAPP) if ch.isdigit())
    return f"https://wa.me/{number}?text={quote(message, safe='')}"
