DISCLAIMER = (
    "Net income uses a simplified Swedish tax model (grundavdrag, flat municipal "
    "rate, jobbskatteavdrag and state tax above the threshold). "
    "Results are estimates only; your actual tax and your bank's affordability "
    "calculation (kvar att leva på) may differ."
)

# Monthly tax constants for the primary earner (SEK, 2025 levels).
BASIC_ALLOWANCE = 3000.0        # grundavdrag
MUNICIPAL_TAX_RATE = 0.31       # kommunalskatt
STATE_TAX_RATE = 0.20           # statlig skatt
STATE_TAX_THRESHOLD = 53592.0   # skiktgräns per month
JOB_TAX_CREDIT = 3100.0         # jobbskatteavdrag

# Secondary jobs are taxed at a flat rate without allowance or credit.
SECONDARY_TAX_RATE = 0.33

INTEREST_RATE_OPTIONS = [1.5, 2.0, 2.5, 3.0, 3.5, 4.0, 4.5, 5.0, 5.5, 6.0]
AMORTIZATION_RATE_OPTIONS = [0.0, 1.0, 2.0, 3.0]

# Fixed category catalog: category id -> (label, {subcategory id: label}).
# Iteration order here is the rendering order.
EXPENSE_CATEGORIES = {
    "home": ("Home", {
        "rent-monthly-fee": "Rent / monthly fee",
        "electricity-heating": "Electricity and heating",
        "mortgage": "Mortgage (other loans)",
        "water-garbage": "Water and garbage",
        "utilities": "Broadband, TV and phone",
        "home-insurance": "Home insurance",
    }),
    "carTransportation": ("Car and transportation", {
        "fuel": "Fuel",
        "car-loan": "Car loan / leasing",
        "parking": "Parking",
        "public-transport": "Public transport",
    }),
    "food": ("Food", {
        "groceries": "Groceries",
        "restaurants-cafes": "Restaurants and cafés",
    }),
    "leisure": ("Leisure time", {
        "hobbies": "Hobbies",
        "subscriptions": "Streaming and subscriptions",
        "gym": "Gym and sports",
    }),
    "shoppingServices": ("Shopping and services", {
        "clothes": "Clothes",
        "household-goods": "Household goods",
    }),
    "loansTaxFees": ("Loans, tax and fees", {
        "student-loan": "Student loan",
        "other-loans": "Other loans",
        "bank-fees": "Bank fees",
    }),
    "healthBeauty": ("Health and beauty", {
        "healthcare": "Healthcare and medicine",
        "beauty": "Hairdresser and beauty",
    }),
    "children": ("Children", {
        "childcare": "Preschool and childcare",
        "pocket-money": "Pocket money",
        "activities": "Activities",
    }),
    "insurance": ("Insurance", {
        "life": "Life insurance",
        "accident": "Accident insurance",
    }),
    "savingsInvestments": ("Savings and investments", {
        "savings": "Savings",
        "pension": "Private pension",
    }),
    "vacationTraveling": ("Vacation and travelling", {
        "travel": "Travel",
    }),
    "education": ("Education", {
        "courses": "Courses and literature",
    }),
    "uncategorized": ("Uncategorised expenses", {
        "other": "Other",
    }),
}

# Home subcategories that count as running housing costs.
HOUSING_EXPENSE_KEYS = [
    ("home", "rent-monthly-fee"),
    ("home", "electricity-heating"),
    ("home", "mortgage"),
    ("home", "water-garbage"),
]

FORECAST_DEFAULTS = {"salary_increase_rate": 0.025, "max_years": 50, "fallback_rate_pct": 3.0}

HEALTH_WEIGHTS = {
    "debt_to_income_ratio": 0.25,
    "emergency_fund_coverage": 0.25,
    "savings_rate": 0.20,
    "housing_cost_ratio": 0.15,
    "discretionary_income_ratio": 0.15,
}

# Thresholds that trigger a recommendation.
HEALTH_LIMITS = {
    "max_dti": 4.3,
    "min_emergency_months": 3.0,
    "min_savings_rate": 0.2,
    "max_housing_ratio": 0.3,
    "min_discretionary_ratio": 0.2,
}
