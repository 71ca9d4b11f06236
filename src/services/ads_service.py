import time
from dataclasses import dataclass


@dataclass(frozen=True)
class AdSlotState:
    text: str
    remaining_ms: int


class AdRotation:
    """Cyclic banner rotation where each text stays up for its own display time."""

    def __init__(self, texts: list[str], display_times_ms: list[int]):
        if len(texts) != len(display_times_ms):
            raise ValueError("Ad texts and display times must have the same length")
        if any(t <= 0 for t in display_times_ms):
            raise ValueError("Ad display times must be positive")
        self.texts = list(texts)
        self.display_times_ms = list(display_times_ms)

    @property
    def cycle_ms(self) -> int:
        return sum(self.display_times_ms)

    def current(self, elapsed_ms: int) -> AdSlotState | None:
        if not self.texts:
            return None
        offset = max(elapsed_ms, 0) % self.cycle_ms
        for text, duration in zip(self.texts, self.display_times_ms):
            if offset < duration:
                return AdSlotState(text=text, remaining_ms=duration - offset)
            offset -= duration
        return None


AD_SLOTS: dict[str, AdRotation] = {
    "top": AdRotation(
        [
            "Your Ad Here - Promote Your Products!",
            "Special Discount - Save 20% Today!",
            "Limited Time Offer - Buy One Get One Free!",
            "New Products Just Added!",
            "Shop Our Best Sellers!",
        ],
        [27000, 27000, 3000, 10000, 5000],
    ),
    "bottom": AdRotation(
        [
            "Exclusive Deals on Cleaning Supplies!",
            "Free Shipping on Orders Over $50!",
            "Shop New Arrivals Now!",
            "Flash Sale - Ending in 3 Seconds!",
            "Clearance Items - Limited Stock!",
            "Buy More, Save More on Hygiene!",
            "Limited Stock Available!",
            "Last Chance for Special Offers!",
            "Don't Miss Out!",
        ],
        [8300, 8300, 8300, 3000, 8300, 8300, 8300, 3000, 4000],
    ),
}

_started_at = time.monotonic()


def elapsed_ms() -> int:
    return int((time.monotonic() - _started_at) * 1000)


def current_ads(at_ms: int | None = None) -> dict[str, AdSlotState | None]:
    now = elapsed_ms() if at_ms is None else at_ms
    return {slot: rotation.current(now) for slot, rotation in AD_SLOTS.items()}
