"""
Sample listing generator used to seed development databases.
"""

from typing import List, Dict, Any, Optional
from decimal import Decimal
import random

from homeswift.models.property import PropertyType, ListingType, PropertyStatus


PROPERTY_TYPES = ["House", "Apartment", "Condo", "Townhouse", "Land"]

# Label -> (listing type, status)
LISTING_STATUSES = {
    "For Sale": (ListingType.SALE, PropertyStatus.ACTIVE),
    "For Rent": (ListingType.RENT, PropertyStatus.ACTIVE),
    "Sold": (ListingType.SALE, PropertyStatus.SOLD),
    "Pending": (ListingType.SALE, PropertyStatus.PENDING),
}

CITIES = [
    ("New York", "NY"),
    ("Los Angeles", "CA"),
    ("Chicago", "IL"),
    ("Houston", "TX"),
    ("Phoenix", "AZ"),
    ("Philadelphia", "PA"),
    ("San Antonio", "TX"),
    ("San Diego", "CA"),
    ("Dallas", "TX"),
    ("San Jose", "CA"),
]

STREETS = ["Oak", "Maple", "Cedar", "Pine", "Elm", "Lakeview", "Sunset", "Park", "Hillside", "River"]
STREET_SUFFIXES = ["St", "Ave", "Blvd", "Dr", "Ln", "Ct"]
ADJECTIVES = ["Spacious", "Modern", "Charming", "Sunny", "Renovated", "Cozy", "Elegant", "Quiet"]
FEATURES = [
    "an open floor plan",
    "a renovated kitchen",
    "hardwood floors",
    "a private backyard",
    "walk-in closets",
    "a two-car garage",
    "mountain views",
    "in-unit laundry",
]


class ListingGenerator:
    """
    Generates listing payloads for PropertyRepository.create_property.
    The same seed always yields the same listings.
    """

    def __init__(self, seed: Optional[int] = None):
        self.random = random.Random(seed)

    def generate(self, count: int) -> List[Dict[str, Any]]:
        return [self.generate_one() for _ in range(count)]

    def generate_one(self) -> Dict[str, Any]:
        rng = self.random

        type_label = rng.choice(PROPERTY_TYPES)
        status_label = rng.choice(list(LISTING_STATUSES))
        listing_type, status = LISTING_STATUSES[status_label]
        city, state = rng.choice(CITIES)

        if type_label == "Land":
            bedrooms, bathrooms = 0, 0
        else:
            bedrooms = rng.randint(1, 5)
            bathrooms = 1 if bedrooms == 1 else rng.randint(1, bedrooms)

        if listing_type == ListingType.RENT:
            price = rng.randrange(800, 6001, 50)
        else:
            price = rng.randrange(100_000, 2_000_001, 1000)

        adjective = rng.choice(ADJECTIVES)
        title = f"{adjective} {type_label} in {city}"
        if bedrooms:
            title = f"{adjective} {bedrooms}-Bedroom {type_label} in {city}"

        features = rng.sample(FEATURES, k=rng.randint(2, 3))
        description = (
            f"{adjective} {type_label.lower()} {status_label.lower()} in {city}, {state}, "
            f"featuring {', '.join(features[:-1])} and {features[-1]}."
        )

        images = [
            {
                "image_url": f"/property-images/apartment-{rng.randint(1, 50)}.jpg",
                "is_primary": index == 0,
                "display_order": index,
            }
            for index in range(rng.randint(2, 5))
        ]

        return {
            "title": title,
            "description": description,
            "price": Decimal(price),
            "address": f"{rng.randint(100, 9999)} {rng.choice(STREETS)} {rng.choice(STREET_SUFFIXES)}",
            "city": city,
            "state": state,
            "zip_code": f"{rng.randint(10000, 99999)}",
            "country": "US",
            "bedrooms": bedrooms,
            "bathrooms": Decimal(bathrooms),
            "area_sqft": rng.randrange(500, 4001, 100),
            "year_built": rng.randint(1950, 2023),
            "property_type": PropertyType(type_label.lower()),
            "listing_type": listing_type,
            "status": status,
            "is_featured": rng.random() < 0.5,
            "images": images,
        }


def generate_properties(count: int, seed: Optional[int] = None) -> List[Dict[str, Any]]:
    """Generate `count` listings, each with 2 to 5 gallery images."""
    return ListingGenerator(seed).generate(count)
