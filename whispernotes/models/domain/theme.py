"""Theme domain model."""

from typing import Optional

from whispernotes.models.domain.base import RecordModel


class Theme(RecordModel):
    """A visual theme. Colors are CSS values, the rest are style class names."""
    id: str
    name: str
    description: str
    image: str
    primary_color: str
    secondary_color: str
    accent_color: str
    background_image: Optional[str] = None
    dark_mode: Optional[bool] = None
    background_gradient: str
    text_color: str
    card_background: str
    card_text_color: str
    accent_text_color: str

    @property
    def is_dark(self) -> bool:
        return bool(self.dark_mode)

    def same_palette(self, other: "Theme") -> bool:
        """True when both themes are equal on every field except dark_mode."""
        return self.model_dump(exclude={"dark_mode"}) == other.model_dump(exclude={"dark_mode"})
