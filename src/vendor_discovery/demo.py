"""
Демо-данные для локального каталога (без бэкенда).
"""
import random
from datetime import datetime, timedelta
from typing import List, Optional

from vendor_discovery.models.filter_state import OCCASIONS
from vendor_discovery.models.vendor import Coordinates, VendorRecord, VendorSummary

# (slug, подпись, центр эмирата)
EMIRATES = [
    ("dubai",          "Dubai",          25.2048, 55.2708),
    ("abu-dhabi",      "Abu Dhabi",      24.4539, 54.3773),
    ("sharjah",        "Sharjah",        25.3463, 55.4209),
    ("ajman",          "Ajman",          25.4052, 55.5136),
    ("ras-al-khaimah", "Ras Al Khaimah", 25.8007, 55.9762),
    ("fujairah",       "Fujairah",       25.1288, 56.3265),
    ("umm-al-quwain",  "Umm Al Quwain",  25.5647, 55.5552),
]

# main_category -> (подпись, подкатегории, диапазон цен AED)
CATEGORIES = {
    "photography": ("Photography", ["wedding-photography", "event-photography", "videography"], (800, 6000)),
    "catering": ("Catering", ["buffet", "live-stations", "desserts"], (1500, 20000)),
    "venues": ("Venues", ["ballrooms", "outdoor-venues", "rooftops"], (5000, 60000)),
    "decor": ("Decor", ["floral", "lighting", "stage-design"], (1000, 15000)),
    "entertainment": ("Entertainment", ["djs", "live-bands", "magicians"], (1200, 12000)),
    "planning": ("Event Planning", ["wedding-planners", "corporate-planners"], (3000, 40000)),
}

NAME_PARTS = (
    ["Golden", "Desert", "Pearl", "Falcon", "Oasis", "Marina", "Crescent", "Azure", "Palm", "Dune"],
    ["Lens", "Table", "Hall", "Bloom", "Beats", "Events", "Studio", "Spark", "Garden", "Story"],
)


def slugify(text: str) -> str:
    return "-".join(text.lower().replace("&", "and").split())


def generate_demo_vendors(count: int = 60, seed: Optional[int] = None) -> List[VendorRecord]:
    """
    Генерирует правдоподобных вендоров по эмиратам ОАЭ.
    Примерно каждый восьмой — без координат (для проверки заглушки карты).
    """
    rng = random.Random(seed)
    now = datetime.now()
    records = []
    used_slugs = set()

    category_keys = list(CATEGORIES)
    for i in range(count):
        main_category = category_keys[i % len(category_keys)]
        label, subs, (low, high) = CATEGORIES[main_category]
        city, city_label, lat, lng = rng.choice(EMIRATES)

        name = f"{rng.choice(NAME_PARTS[0])} {rng.choice(NAME_PARTS[1])} {label}"
        slug = slugify(name)
        if slug in used_slugs:
            slug = f"{slug}-{i}"
        used_slugs.add(slug)

        sub_categories = rng.sample(subs, rng.randint(1, len(subs)))
        coordinates = None
        if rng.random() > 0.125:
            coordinates = Coordinates(
                round(lat + rng.uniform(-0.08, 0.08), 6),
                round(lng + rng.uniform(-0.08, 0.08), 6),
            )

        summary = VendorSummary(
            id=f"demo-{i + 1:04d}",
            slug=slug,
            business_name=name,
            logo=None,
            gallery=[f"https://picsum.photos/seed/{slug}-{n}/640/480" for n in range(rng.randint(1, 4))],
            categories=[label] + [s.replace("-", " ").title() for s in sub_categories],
            tagline=f"{label} in {city_label}",
            description=(
                f"{name} offers {label.lower()} services across {city_label} "
                f"for weddings, corporate events and private celebrations."
            ),
            rating=round(rng.uniform(2.5, 5.0), 1),
            starting_price=float(rng.randrange(low, high, 50)),
            is_recommended=rng.random() > 0.7,
            coordinates=coordinates,
            city=city,
        )
        records.append(VendorRecord(
            summary=summary,
            main_category=main_category,
            sub_categories=sub_categories,
            occasions=rng.sample(OCCASIONS, rng.randint(1, 4)),
            created_at=(now - timedelta(days=rng.randint(0, 365), minutes=i)).isoformat(),
        ))

    return records
