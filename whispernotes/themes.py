"""Built-in theme catalog. Fixed at import time, never mutated."""

from whispernotes.models import Theme

GHIBLI_THEMES: tuple[Theme, ...] = (
    Theme(
        id="default",
        name="Ghibli Meadows",
        description="The default Ghibli-inspired theme with peaceful sky blues and warm beige tones",
        image="howl-sky",
        primary_color="#A4C6E7",
        secondary_color="#F7EFE2",
        accent_color="#E6C17A",
        background_gradient="bg-gradient-to-b from-ghibli-sky-light to-ghibli-beige",
        text_color="text-ghibli-navy",
        card_background="bg-white/80",
        card_text_color="text-ghibli-navy",
        accent_text_color="text-ghibli-terracotta",
    ),
    Theme(
        id="totoro-forest",
        name="Totoro's Forest",
        description="Lush greens and earth tones inspired by My Neighbor Totoro",
        image="totoro-forest",
        primary_color="#8CAB93",
        secondary_color="#F7EFE2",
        accent_color="#D4A28B",
        background_gradient="bg-gradient-to-b from-green-100 to-green-50",
        text_color="text-green-900",
        card_background="bg-green-50/90",
        card_text_color="text-green-900",
        accent_text_color="text-green-700",
    ),
    Theme(
        id="spirited-bath",
        name="Spirited Bathhouse",
        description="Rich reds and golds inspired by the bathhouse in Spirited Away",
        image="spirited-bath",
        primary_color="#D4A28B",
        secondary_color="#F7EFE2",
        accent_color="#E6C17A",
        background_gradient="bg-gradient-to-b from-red-100 to-orange-50",
        text_color="text-red-900",
        card_background="bg-red-50/90",
        card_text_color="text-red-900",
        accent_text_color="text-red-700",
    ),
    Theme(
        id="kiki-delivery",
        name="Kiki's Delivery",
        description="Purple skies and soft pinks inspired by Kiki's Delivery Service",
        image="kiki-delivery",
        primary_color="#E6BAB7",
        secondary_color="#F7EFE2",
        accent_color="#A4C6E7",
        background_gradient="bg-gradient-to-b from-purple-100 to-pink-50",
        text_color="text-purple-900",
        card_background="bg-purple-50/90",
        card_text_color="text-purple-900",
        accent_text_color="text-purple-700",
    ),
    Theme(
        id="ghibli-night",
        name="Ghibli Night",
        description="A soothing dark theme for nighttime journaling",
        image="howl-sky",
        primary_color="#1F2937",
        secondary_color="#374151",
        accent_color="#F8D078",
        dark_mode=True,
        background_gradient="bg-gradient-to-b from-ghibli-navy to-gray-900",
        text_color="text-ghibli-cream",
        card_background="bg-ghibli-navy/60",
        card_text_color="text-ghibli-cream",
        accent_text_color="text-ghibli-amber",
    ),
)

DEFAULT_THEME = GHIBLI_THEMES[0]
