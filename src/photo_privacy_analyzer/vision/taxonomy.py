"""Keyword taxonomies used to turn fused labels into lifestyle guesses."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from photo_privacy_analyzer.models import FusedLabel


@dataclass(frozen=True)
class KeywordTaxonomy:
    """Ordered category -> keywords table with a per-label score threshold.

    A category matches when any label scoring strictly above the threshold
    contains one of its keywords (case-insensitive substring).
    """

    categories: dict[str, tuple[str, ...]]
    threshold: float

    def matches(self, labels: Sequence[FusedLabel], threshold: float | None = None) -> list[str]:
        """All matching categories, in table order."""
        limit = self.threshold if threshold is None else threshold
        return [
            category
            for category, keywords in self.categories.items()
            if any_keyword(labels, keywords, above=limit)
        ]

    def first_match(self, labels: Sequence[FusedLabel]) -> str | None:
        """The first matching category in table order, or None."""
        found = self.matches(labels)
        return found[0] if found else None


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(k in lowered for k in keywords)


def any_keyword(
    labels: Sequence[FusedLabel], keywords: Iterable[str], above: float | None = None
) -> bool:
    """True if any label (optionally only those scoring above ``above``) has a keyword."""
    keywords = tuple(keywords)
    return any(
        (above is None or label.score > above) and contains_any(label.description, keywords)
        for label in labels
    )


RACE = KeywordTaxonomy(
    categories={
        "Asian": (
            "asian", "chinese", "japanese", "korean", "vietnamese", "thai", "malaysian",
            "indonesian", "oriental", "east asian", "mongoloid", "filipino", "taiwan",
            "hongkong", "singapore",
        ),
        "Caucasian": (
            "caucasian", "european", "white person", "western", "white", "fair skin", "anglo",
            "nordic", "slavic", "german", "french", "italian", "english", "american",
            "australian",
        ),
        "Black": (
            "african", "black person", "african american", "dark skin", "ebony", "negro",
            "jamaican", "nigerian", "kenyan", "ethiopian", "somali",
        ),
        "Latino": (
            "latino", "latina", "hispanic", "mexican", "spanish", "latin american",
            "puerto rican", "cuban", "dominican", "brazilian", "colombian", "central american",
            "south american",
        ),
        "Middle Eastern": (
            "middle eastern", "arab", "persian", "turkish", "arabic", "saudi", "iranian",
            "iraqi", "egyptian", "lebanese", "syrian", "dubai", "qatar", "mediterranean",
        ),
    },
    threshold=0.1,
)

# Threshold is a base value, scaled per image by label quality
INTERESTS = KeywordTaxonomy(
    categories={
        "Sports": (
            "sport", "basketball", "football", "soccer", "tennis", "golf", "swimming",
            "athlete", "ball", "game", "baseball", "hockey", "running", "cycling", "fitness",
            "outdoor activity",
        ),
        "Fashion": (
            "fashion", "model", "style", "clothing", "design", "luxury", "beauty", "cosmetics",
            "makeup", "accessory", "jewelry", "brand", "trend",
        ),
        "Technology": (
            "technology", "computer", "device", "electronic", "digital", "smartphone",
            "internet", "tech", "gadget", "software", "hardware", "phone", "laptop", "tablet",
        ),
        "Art": (
            "art", "painting", "museum", "gallery", "artist", "creative", "design", "sculpture",
            "photography", "drawing", "craft", "exhibition",
        ),
        "Travel": (
            "travel", "tourism", "vacation", "trip", "tourist", "destination", "adventure",
            "explore", "journey", "sightseeing", "landmark", "hotel", "resort",
        ),
        "Food": (
            "food", "cuisine", "restaurant", "cooking", "chef", "culinary", "dining", "meal",
            "dish", "recipe", "baking", "dessert", "drink", "coffee", "wine",
        ),
        "Nature": (
            "nature", "outdoor", "landscape", "environment", "wildlife", "garden", "hiking",
            "camping", "mountain", "beach", "forest", "park", "sea", "ocean", "lake",
        ),
        "Music": (
            "music", "concert", "instrument", "musician", "band", "singer", "audio", "sound",
            "song", "guitar", "piano", "vocal", "dance", "pop", "rock",
        ),
        "Reading": (
            "book", "reading", "literature", "novel", "magazine", "publication", "library",
            "author", "story", "poetry", "education",
        ),
        "Fitness": (
            "fitness", "exercise", "workout", "gym", "health", "training", "wellness", "yoga",
            "running", "strength", "sports", "athletic",
        ),
    },
    threshold=0.1,
)

POLITICAL = KeywordTaxonomy(
    categories={
        "Conservative Leaning": (
            "church", "traditional", "rural", "military", "flag", "prayer", "patriotic",
            "religious", "conservative", "conventional", "heritage", "nationalist",
        ),
        "Liberal Leaning": (
            "protest", "university", "urban", "multicultural", "diversity", "progressive",
            "activism", "liberal", "inclusive", "modern", "international", "global",
        ),
        "Neutral/Unknown": (
            "neutral", "business", "professional", "office", "formal", "casual", "everyday",
            "common", "regular", "standard",
        ),
    },
    threshold=0.2,
)

INCOME = KeywordTaxonomy(
    categories={
        "High Income": (
            "luxury", "expensive", "yacht", "mansion", "designer", "high-end", "premium",
            "executive", "business", "elite", "upscale", "gourmet", "first class", "vip",
            "wealth", "rich", "exclusive",
        ),
        "Middle Income": (
            "comfortable", "suburban", "middle-class", "standard", "common", "average",
            "typical", "normal", "regular", "modest", "ordinary", "conventional",
        ),
        "Low Income": (
            "basic", "simple", "budget", "economy", "minimal", "modest", "affordable", "cheap",
            "discount", "essential", "plain", "frugal",
        ),
    },
    threshold=0.2,
)

# Fallback interests, checked in order when no interest clears its threshold
INTEREST_FALLBACKS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("outdoor", "nature", "landscape"), ("Nature", "Travel")),
    (("sport", "game", "activity", "exercise"), ("Sports", "Fitness")),
    (("food", "drink", "meal", "restaurant"), ("Food",)),
    (("device", "technology", "phone", "computer"), ("Technology",)),
)

CONSERVATIVE_CONTEXT = ("business", "office", "formal", "traditional", "family")
CONSERVATIVE_CONTEXT_THRESHOLD = 0.3

LUXURY_CONTEXT = (
    "luxury", "premium", "expensive", "designer", "elegant", "formal", "professional",
    "executive",
)
HIGH_END_ACTIVITIES = (
    "golf", "tennis", "yacht", "sailing", "resort", "cruise", "vacation", "travel", "tourism",
)
SIMPLE_LIFESTYLE = ("simple", "basic", "rural", "farm", "countryside", "village")

CLOTHING_KEYWORDS = (
    "shirt", "dress", "pants", "jacket", "coat", "suit", "uniform", "t-shirt", "jeans",
    "shoes", "hat", "cap", "glasses", "sunglasses", "tie", "clothing", "outfit", "attire",
    "fashion", "wear", "apparel", "garment", "accessory", "jewelry", "hoodie", "sweater",
    "trouser", "shorts", "skirt", "blouse", "vest", "sock", "boot", "sneaker", "scarf",
    "glove", "collar", "pocket", "button", "zipper", "formal wear", "casual wear", "costume",
    "dress shirt", "polo shirt", "denim", "leather", "cotton", "wool", "silk", "linen",
    "sandals", "heels", "watch", "necklace", "bracelet", "ring", "earring",
)
CLOTHING_THRESHOLD = 0.1
UPPER_BODY = ("shirt", "t-shirt", "blouse", "jacket", "coat", "sweater", "hoodie", "suit")
LOWER_BODY = ("pants", "jeans", "shorts", "skirt", "trouser", "dress")
ACCESSORIES = (
    "hat", "cap", "glasses", "sunglasses", "tie", "jewelry", "watch", "necklace", "earring",
    "ring",
)

PERSON_KEYWORDS = (
    "photography", "portrait", "person", "people", "selfie", "photo", "human", "face",
    "individual", "figure", "model", "pose", "photographer",
)

INTEREST_ADS: dict[str, tuple[str, ...]] = {
    "Fashion": ("Fashion Apparel", "Beauty Products", "Accessories"),
    "Technology": ("Tech Products", "Electronics", "Software", "Smart Devices"),
    "Travel": ("Travel Destinations", "Hotels", "Flight Tickets"),
    "Food": ("Food & Restaurants", "Cooking Equipment", "Food Delivery"),
    "Sports": ("Sports Equipment", "Fitness Memberships", "Sports Apparel"),
    "Nature": ("Outdoor Gear", "Eco-friendly Products", "Camping Equipment"),
    "Music": ("Music Streaming", "Concert Tickets", "Audio Equipment"),
    "Art": ("Art Supplies", "Gallery Exhibitions", "Design Software"),
    "Reading": ("Books", "E-readers", "Magazine Subscriptions"),
    "Fitness": ("Fitness Equipment", "Health Supplements", "Workout Apparel"),
}
GENERIC_AD = "General Consumer Products"

INCOME_ADS: dict[str, tuple[str, ...]] = {
    "High Income": ("Luxury Goods", "Premium Vehicles", "Financial Services"),
    "Middle Income": ("Mid-range Products", "Affordable Services", "Family Packages"),
    "Low Income": ("Budget Options", "Discount Stores", "Coupons"),
}

# Per label, only the first matching trigger contributes
OBJECT_AD_TRIGGERS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (
        ("car", "vehicle", "automobile", "transportation", "driving"),
        ("Automotive", "Car Insurance", "Auto Parts"),
    ),
    (
        ("house", "home", "apartment", "real estate", "property", "building", "residence"),
        ("Real Estate", "Home Improvement", "Furniture"),
    ),
    (
        ("pet", "dog", "cat", "animal", "bird", "fish"),
        ("Pet Products", "Pet Food", "Veterinary Services"),
    ),
    (
        ("child", "baby", "kid", "family", "parent", "toddler", "infant"),
        ("Family Products", "Children Clothes", "Toys"),
    ),
    (
        ("fitness", "exercise", "workout", "gym", "sport", "training", "health"),
        ("Fitness Products", "Health Supplements", "Workout Plans"),
    ),
    (
        ("phone", "computer", "laptop", "tech", "digital", "electronic", "device"),
        ("Electronics", "Software", "Mobile Apps"),
    ),
)
OBJECT_AD_THRESHOLD = 0.2
MAX_AD_CATEGORIES = 8

# Scene and event emphasis applied to raw labels before fusion
ENVIRONMENT_KEYWORDS = (
    "outdoor", "nature", "sky", "landscape", "building", "architecture", "street", "indoor",
    "room", "house", "interior", "furniture", "office", "home",
)
OUTDOOR_KEYWORDS = (
    "outdoor", "nature", "sky", "landscape", "forest", "mountain", "beach", "sea", "ocean",
)
INDOOR_KEYWORDS = (
    "indoor", "room", "house", "interior", "furniture", "office", "home", "wall", "floor",
)
NATURE_KEYWORDS = (
    "nature", "forest", "mountain", "beach", "sea", "ocean", "river", "lake", "tree", "flower",
    "grass",
)
URBAN_KEYWORDS = (
    "city", "building", "architecture", "street", "road", "urban", "downtown", "skyscraper",
)
NATURE_BOOST_KEYWORDS = ("nature", "natural", "landscape", "outdoor", "scenery")
URBAN_BOOST_KEYWORDS = ("urban", "city", "building", "architecture")
INDOOR_BOOST_KEYWORDS = ("indoor", "interior", "room", "home", "house", "office")
EVENT_KEYWORDS = (
    "wedding", "party", "ceremony", "celebration", "concert", "festival", "event", "meeting",
    "conference", "sport", "game", "match", "graduation", "birthday",
)
