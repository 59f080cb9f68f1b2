from __future__ import annotations

from cleanbook.domain.entities.catalog import AddonCatalogEntry, PricingMode, ServiceCatalogEntry


SERVICES: tuple[ServiceCatalogEntry, ...] = (
    ServiceCatalogEntry(6, "Regular Cleaning (without materials)", PricingMode.HOURLY, 35, 35, category="regular"),
    ServiceCatalogEntry(7, "Regular Cleaning (with materials)", PricingMode.HOURLY, 45, 45, category="regular"),
    ServiceCatalogEntry(8, "Deep Cleaning (without materials)", PricingMode.HOURLY, 45, 45, category="deep"),
    ServiceCatalogEntry(9, "Deep Cleaning (with materials)", PricingMode.HOURLY, 55, 55, category="deep"),
    ServiceCatalogEntry(10, "Full Villa Deep Cleaning", PricingMode.FLAT, 1299, category="packages"),
    ServiceCatalogEntry(11, "Full Apartment Deep Cleaning", PricingMode.FLAT, 699, category="packages"),
    ServiceCatalogEntry(12, "Villa Facade Cleaning", PricingMode.FLAT, 899, category="packages"),
    ServiceCatalogEntry(13, "Move in/Move out Cleaning", PricingMode.FLAT, 599, category="packages"),
    ServiceCatalogEntry(14, "Post-construction Cleaning", PricingMode.FLAT, 999, category="packages"),
    ServiceCatalogEntry(15, "Kitchen Deep Cleaning", PricingMode.FLAT, 349, category="packages"),
    ServiceCatalogEntry(16, "Bathroom Deep Cleaning", PricingMode.FLAT, 299, category="packages"),
    ServiceCatalogEntry(17, "Internal Window Cleaning", PricingMode.PER_UNIT, 20, category="specialized"),
    ServiceCatalogEntry(18, "External Window Cleaning", PricingMode.PER_UNIT, 25, category="specialized"),
    ServiceCatalogEntry(19, "Full Villa Window Package", PricingMode.PER_UNIT, 799, category="specialized"),
)

ADDONS: tuple[AddonCatalogEntry, ...] = (
    AddonCatalogEntry(1, "Fridge Cleaning", 50, category="other", unit="per fridge"),
    AddonCatalogEntry(2, "Oven Cleaning", 80, category="other", unit="per oven"),
    AddonCatalogEntry(3, "Balcony Cleaning", 90, category="other", unit="per balcony"),
    AddonCatalogEntry(4, "Wardrobe/Cabinet Cleaning", 60, category="other", unit="per wardrobe"),
    AddonCatalogEntry(5, "Ironing Service", 40, category="other", unit="per hour"),
    AddonCatalogEntry(6, "Sofa Cleaning", 45, category="sofa", subcategory="per_seat", unit="per seat"),
    AddonCatalogEntry(7, "Carpet Cleaning", 100, category="carpet", unit="per carpet"),
    AddonCatalogEntry(8, "Mattress Cleaning (Single)", 99, category="mattress", subcategory="single", unit="per mattress"),
    AddonCatalogEntry(9, "Mattress Cleaning (Double)", 149, category="mattress", subcategory="double", unit="per mattress"),
    AddonCatalogEntry(10, "Curtains Cleaning", 75, category="curtains", unit="per panel"),
)
