"""Read-only expense category tables and keyword categorization."""
from types import MappingProxyType

EXPENSE_CATEGORIES = (
    "Food & Dining",
    "Groceries",
    "Transportation",
    "Entertainment",
    "Shopping",
    "Utilities",
    "Rent",
    "Travel",
    "Healthcare",
    "Education",
    "Personal Care",
    "Gifts & Donations",
    "Business",
    "Home Improvement",
    "Insurance",
    "Taxes",
    "Fees & Charges",
    "Other",
)

# Checked in order; the first keyword found in the description wins.
KEYWORD_CATEGORIES = MappingProxyType({
    "restaurant": "Food & Dining",
    "cafe": "Food & Dining",
    "coffee": "Food & Dining",
    "dinner": "Food & Dining",
    "lunch": "Food & Dining",
    "breakfast": "Food & Dining",
    "pizza": "Food & Dining",
    "takeout": "Food & Dining",
    "grocery": "Groceries",
    "supermarket": "Groceries",
    "food": "Groceries",
    "uber": "Transportation",
    "lyft": "Transportation",
    "taxi": "Transportation",
    "gas": "Transportation",
    "fuel": "Transportation",
    "bus": "Transportation",
    "train": "Transportation",
    "parking": "Transportation",
    "transit": "Transportation",
    "movie": "Entertainment",
    "game": "Entertainment",
    "concert": "Entertainment",
    "netflix": "Entertainment",
    "spotify": "Entertainment",
    "theater": "Entertainment",
    "event": "Entertainment",
    "ticket": "Entertainment",
    "shopping": "Shopping",
    "clothes": "Shopping",
    "clothing": "Shopping",
    "mall": "Shopping",
    "amazon": "Shopping",
    "store": "Shopping",
    "shop": "Shopping",
    "purchase": "Shopping",
    "electricity": "Utilities",
    "water": "Utilities",
    "internet": "Utilities",
    "phone": "Utilities",
    "wifi": "Utilities",
    "cable": "Utilities",
    "utility": "Utilities",
    "electric": "Utilities",
    "rent": "Rent",
    "mortgage": "Rent",
    "hotel": "Travel",
    "flight": "Travel",
    "airbnb": "Travel",
    "vacation": "Travel",
    "trip": "Travel",
    "booking": "Travel",
    "doctor": "Healthcare",
    "medicine": "Healthcare",
    "hospital": "Healthcare",
    "pharmacy": "Healthcare",
    "medical": "Healthcare",
    "healthcare": "Healthcare",
    "fitness": "Healthcare",
    "gym": "Healthcare",
    "course": "Education",
    "tuition": "Education",
    "books": "Education",
    "school": "Education",
    "haircut": "Personal Care",
    "salon": "Personal Care",
    "spa": "Personal Care",
    "charity": "Gifts & Donations",
    "gift": "Gifts & Donations",
    "present": "Gifts & Donations",
    "donation": "Gifts & Donations",
    "business": "Business",
    "office": "Business",
    "repair": "Home Improvement",
    "furniture": "Home Improvement",
    "renovation": "Home Improvement",
    "maintenance": "Home Improvement",
    "insurance": "Insurance",
    "tax": "Taxes",
    "fee": "Fees & Charges",
    "penalty": "Fees & Charges",
    "fine": "Fees & Charges",
    "subscription": "Fees & Charges",
    "payment": "Fees & Charges",
    "bill": "Fees & Charges",
})

CATEGORY_EMOJI = MappingProxyType({
    "Food & Dining": "🍽️",
    "Groceries": "🛒",
    "Transportation": "🚗",
    "Entertainment": "🎬",
    "Shopping": "🛍️",
    "Utilities": "💡",
    "Rent": "🏠",
    "Travel": "✈️",
    "Healthcare": "🏥",
    "Education": "📚",
    "Personal Care": "💇",
    "Gifts & Donations": "🎁",
    "Business": "💼",
    "Home Improvement": "🔨",
    "Insurance": "🛡️",
    "Taxes": "📝",
    "Fees & Charges": "💰",
})

DEFAULT_EMOJI = "💵"

def categorize_expense(description: str) -> str:
    if not description or not description.strip():
        return "Other"
    lowered = description.lower()
    for keyword, category in KEYWORD_CATEGORIES.items():
        if keyword in lowered:
            return category
    return "Other"

def category_emoji(category: str) -> str:
    return CATEGORY_EMOJI.get(category, DEFAULT_EMOJI)
