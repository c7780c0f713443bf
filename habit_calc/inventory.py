"""Equip rules for owned outfits and rooms."""

from .constants import DEFAULT_PET_SPECIES
from .models import InventoryItem, ItemType, PetSpecies


def migrate_legacy_equipped_states(items: list[InventoryItem], active_species: PetSpecies) -> None:
    """
    Fold the old single equipped flag into per-species state.

    A species-locked item stays equipped for its own species; a universal
    item is assigned to whichever species is active.
    """
    for item in items:
        if not item.equipped:
            continue
        if not item.equipped_species:
            item.equipped_species.add(item.species or active_species)
        item.equipped = False


def conflicts_with(item: InventoryItem, other: InventoryItem) -> bool:
    """Rooms exclude every other room; outfits exclude their own class only."""
    if other.id == item.id or other.type != item.type:
        return False
    if item.type == ItemType.ROOM:
        return True
    return other.outfit_class == item.outfit_class


def apply_equip(
    item: InventoryItem,
    all_items: list[InventoryItem],
    active_species: PetSpecies = PetSpecies(DEFAULT_PET_SPECIES),
) -> bool:
    """
    Equip `item` for the active species, unequipping whatever it excludes.

    Equip style never matters here: an overlay hat still replaces a sprite
    hat. Unowned items are refused without touching anything.
    """
    if not item.owned:
        return False

    migrate_legacy_equipped_states(all_items, active_species)

    for other in all_items:
        if conflicts_with(item, other) and other.is_equipped(active_species):
            other.set_equipped(False, active_species)

    item.set_equipped(True, active_species)
    return True


def equipped_items(items: list[InventoryItem], species: PetSpecies) -> list[InventoryItem]:
    return [item for item in items if item.is_equipped(species)]
