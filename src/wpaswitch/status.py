"""
Status queries over the profile catalog.
"""

from typing import List, Tuple

from wpaswitch.profiles.catalog import ProfileCatalog
from wpaswitch.supplicant.client import ProfileStatus

STATUS_GLYPHS = {
    ProfileStatus.ACTIVE: '*',
    ProfileStatus.DISABLED: '!',
    ProfileStatus.ENABLED: ' ',
}


def glyph(status: ProfileStatus) -> str:
    return STATUS_GLYPHS[status]


class StatusQuery:
    """Answers active/enabled questions and renders the profile listing."""

    def __init__(self, catalog: ProfileCatalog):
        self.catalog = catalog

    def is_active(self, name: str) -> bool:
        """
        Raises:
            ProfileNotFound: If no interface knows the profile
        """
        return self.catalog.find(name).status is ProfileStatus.ACTIVE

    def is_enabled(self, name: str) -> bool:
        """
        Raises:
            ProfileNotFound: If no interface knows the profile
        """
        return self.catalog.find(name).status.is_enabled

    def active_profiles(self) -> List[str]:
        return [record.name for record in self.catalog.list_profiles()
                if record.status is ProfileStatus.ACTIVE and record.name]

    def list_entries(self) -> List[Tuple[str, str]]:
        """(glyph, name) for every profile in catalog order."""
        return [(glyph(record.status), record.name)
                for record in self.catalog.list_profiles()]

    def format_listing(self) -> str:
        return '\n'.join(f"{mark} {name}" for mark, name in self.list_entries())
