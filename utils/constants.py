"""
utils/constants.py

Purpose: Centralized static content

- All user-facing chat replies
- Expense category taxonomy
- Collection names and report layout

(Prevents hardcoding across the codebase)
"""

# ============================================================
# CHAT REPLIES
# ============================================================

NOT_REGISTERED_MESSAGE = "You have not yet registered on web. Please register yourself."

JOIN_GREETING_TEMPLATE = (
    "Hey {name}, hope you’re doing well. Would you like to log a new expense, "
    "or would you prefer to check the status of your current expenses?"
)

ANALYTICS_FALLBACK_MESSAGE = "Please ask about spends you have done or spend you want to log."

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."

EXPENSE_LOGGED_TEMPLATE = """Your expense is logged successfully as below:
*📝 Description:* {description}
*✨ Category:* {category}
*🎫 Sub Category:* {sub_category}
*💲 Amount:* {amount}
*📅 Date:* {date}

"""

# Store errors relayed verbatim to the chat
USER_NOT_SIGNED_UP_MESSAGE = "User not found. Please signup."
EXPENSE_CREATE_FAILED_MESSAGE = "Error creating expense. Please try again."


# ============================================================
# CATEGORY TAXONOMY
# ============================================================

# Numbering follows the classifier prompt; 8 and 11 are unused
CATEGORY_TAXONOMY = {
    1: ("Housing", ["Rent", "Taxes", "Insurance", "Utilities", "Repairs", "Improvement", "Fees"]),
    2: ("Transportation", ["Payments", "Fuel", "Insurance", "Repairs", "Public", "Parking", "Tolls", "Licensing"]),
    3: ("Food", ["Groceries", "Dining", "Coffee", "Delivery", "Snacks"]),
    4: ("Utilities", ["Electricity", "Water", "Gas", "Internet", "Cable", "Trash", "Phone"]),
    5: ("Health", ["Insurance", "Dental", "Vision", "Medical", "Prescriptions", "Medications", "Gym", "Wellness"]),
    6: ("Personal", ["Haircuts", "Skincare", "Makeup", "Hygiene", "Clothing"]),
    7: ("Education", ["Tuition", "Books", "Loans", "Courses", "Activities"]),
    9: ("Entertainment", ["Subscriptions", "Movies", "Concerts", "Hobbies", "Books"]),
    10: ("Travel", ["Flights", "Accommodation", "Transportation", "Insurance", "Food", "Activities", "Souvenirs"]),
    12: ("EMI", ["Home loan", "Mobile loan", "Vehicle loan", "Personal loan"]),
    13: ("Miscellaneous", ["Gifts", "Pet", "Office", "Services"]),
}

CATEGORIES = [name for name, _ in CATEGORY_TAXONOMY.values()]


# ============================================================
# INTENTS
# ============================================================

INTENT_SPEND = "spend"
INTENT_ANALYTICS = "analytics"
INTENT_OTHER = "other"


# ============================================================
# STORAGE
# ============================================================

USERS_COLLECTION = "users"
EXPENSES_COLLECTION = "expenses"
OTP_REQUESTS_COLLECTION = "otp_requests"


# ============================================================
# REPORTS
# ============================================================

REPORT_HEADER = ["Description", "Amount", "Category", "Sub Category", "Date"]
REPORT_FILENAME = "expenses.csv"
