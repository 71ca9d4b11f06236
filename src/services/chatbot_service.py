import re

DEFAULT_REPLY = (
    "Sorry, I am still learning. Please ask about specific products, "
    "categories, or the buying process."
)

# Checked in order; first rule with a matching keyword wins.
_RULES: list[tuple[tuple[str, ...], str]] = [
    (
        ("hello", "hi", "hey"),
        "Hello! How can I assist you with our hygiene and cleaning products today?",
    ),
    (
        ("recommend", "suggest"),
        "I recommend checking out our top-rated disinfectants and hand sanitizers! "
        "You can find them in the product list above.",
    ),
    (
        ("price", "cost"),
        "Prices vary by product. Please click on a product card to see its details "
        "and current pricing sourced from Amazon.",
    ),
    (
        ("buy", "purchase", "order"),
        'You can purchase products by clicking the "View on Amazon" button on each '
        "product card. This will take you to Amazon to complete your purchase.",
    ),
    (
        ("shipping",),
        "Shipping is handled by Amazon. Details will be available on the Amazon product page.",
    ),
    (
        ("contact", "support", "help"),
        "I am an automated assistant. If you need further help, please refer to the "
        "product details on Amazon or check the site footer for contact information.",
    ),
]

_WORD_RE = re.compile(r"[a-z]+")


def get_bot_response(message: str) -> str:
    words = set(_WORD_RE.findall(message.lower()))
    for keywords, reply in _RULES:
        if words.intersection(keywords):
            return reply
    return DEFAULT_REPLY
