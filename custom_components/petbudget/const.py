# File: const.py
"""Constants for the PetBudget integration.

This file centralizes storage keys, defaults, tuning values, catalog data,
messages, dispatcher signals and service names for consistency across the
integration. Every rate, cost and threshold used by the engines lives here so
the simulation can be re-balanced without touching engine code.
"""

import logging
from typing import Any, Final

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
PETBUDGET_TITLE = "PetBudget"

# Integration Domain
DOMAIN = "petbudget"

# Logger
LOGGER = logging.getLogger(__package__)

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORAGE_MANAGER = "storage_manager"
STORAGE_KEY = "petbudget_data"
STORAGE_VERSION = 1

# Serialized byte budget for all slots together
DEFAULT_STORAGE_QUOTA_BYTES = 5 * 1024 * 1024

# Periodic decay tick
DEFAULT_DECAY_TICK_MINUTES = 1

# Save slots
SAVE_SLOTS: Final = (1, 2, 3)

# Config Flow
CONFIG_FLOW_STEP_USER = "user"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"

# ------------------------------------------------------------------------------------------------
# Data Keys
# ------------------------------------------------------------------------------------------------

# SLOT
DATA_PET = "pet"
DATA_EXPENSES = "expenses"
DATA_INCOME = "income"
DATA_QUESTS = "quests"
DATA_BADGES = "badges"
DATA_TASK_STATE = "task_state"
DATA_GUIDE_CHECKLIST = "guide_checklist"
DATA_META = "meta"

# Repository document
DATA_SLOTS = "slots"

# META
DATA_META_CREATED_AT = "created_at"
DATA_META_LAST_PLAYED = "last_played"
DATA_META_SLOT_NUMBER = "slot_number"
DATA_META_DEMO = "demo"
DATA_META_DEMO_SEED_VERSION = "demo_seed_version"
DATA_META_LAST_ALLOWANCE_CLAIM = "last_allowance_claim"
DATA_META_LAST_CHECK_IN = "last_check_in"

# PET
DATA_PET_ID = "id"
DATA_PET_NAME = "name"
DATA_PET_SPECIES = "species"
DATA_PET_XP = "xp"
DATA_PET_AGE_STAGE = "age_stage"
DATA_PET_ACKNOWLEDGED_STAGE = "acknowledged_stage"
DATA_PET_STATS = "stats"
DATA_PET_COINS = "coins"
DATA_PET_LIFETIME_EARNINGS = "lifetime_earnings"
DATA_PET_INVENTORY = "inventory"
DATA_PET_TRICKS = "tricks"
DATA_PET_BADGES = "badges"
DATA_PET_CREATED_AT = "created_at"
DATA_PET_LAST_UPDATED = "last_updated"
DATA_PET_LAST_DECAY_AT = "last_decay_at"
DATA_PET_LAST_EVOLUTION_ACK_ID = "last_evolution_ack_id"
# Legacy expense view rebuilt on load, never persisted on the pet
DATA_PET_EXPENSES = "expenses"

# STATS
STAT_HUNGER = "hunger"
STAT_HAPPINESS = "happiness"
STAT_HEALTH = "health"
STAT_ENERGY = "energy"
STAT_CLEANLINESS = "cleanliness"

STAT_KEYS: Final = (
    STAT_HUNGER,
    STAT_HAPPINESS,
    STAT_HEALTH,
    STAT_ENERGY,
    STAT_CLEANLINESS,
)

# LEDGER RECORDS (expense + income)
DATA_RECORD_ID = "id"
DATA_RECORD_TIMESTAMP = "timestamp"
DATA_RECORD_AMOUNT = "amount"
DATA_RECORD_CATEGORY = "category"
DATA_RECORD_SOURCE = "source"
DATA_RECORD_LABEL = "label"
# Legacy fields seen in older saves
DATA_RECORD_LEGACY_TYPE = "type"
DATA_RECORD_LEGACY_DESCRIPTION = "description"
DATA_RECORD_LEGACY_DATE = "date"
LEGACY_RECORD_TYPE_EARNING = "earning"

RECORD_ID_PREFIX_EXPENSE = "expense"
RECORD_ID_PREFIX_INCOME = "income"

# QUESTS
DATA_QUESTS_DAILY = "daily"
DATA_QUESTS_LAST_RESET = "last_reset"
DATA_QUESTS_CLAIMED_TOTAL = "claimed_total"

DATA_QUEST_ID = "id"
DATA_QUEST_TITLE = "title"
DATA_QUEST_DESCRIPTION = "description"
DATA_QUEST_DIFFICULTY = "difficulty"
DATA_QUEST_GOAL = "goal"
DATA_QUEST_PROGRESS = "progress"
DATA_QUEST_REWARD_COINS = "reward_coins"
DATA_QUEST_REWARD_XP = "reward_xp"
DATA_QUEST_STATUS = "status"
DATA_QUEST_COMPLETED_AT = "completed_at"

# TASK STATE
DATA_TASK_ID = "task_id"
DATA_TASK_LAST_COMPLETED_AT = "last_completed_at"
DATA_TASK_IN_PROGRESS = "in_progress"

# GUIDE CHECKLIST
DATA_GUIDE_DATE = "date"
DATA_GUIDE_ITEMS = "items"
DATA_GUIDE_STREAK = "streak"

# SLOT SUMMARY
DATA_SUMMARY_SLOT_NUMBER = "slot_number"
DATA_SUMMARY_EXISTS = "exists"
DATA_SUMMARY_PET_NAME = "pet_name"
DATA_SUMMARY_PET_STAGE = "pet_stage"
DATA_SUMMARY_PET_XP = "pet_xp"
DATA_SUMMARY_LAST_PLAYED = "last_played"

# ------------------------------------------------------------------------------------------------
# Pets
# ------------------------------------------------------------------------------------------------
SPECIES_CAT = "cat"
SPECIES_DOG = "dog"
SPECIES_RABBIT = "rabbit"
SPECIES_OPTIONS: Final = (SPECIES_CAT, SPECIES_DOG, SPECIES_RABBIT)

DEFAULT_STARTING_COINS = 1000
DEFAULT_STAT_VALUE = 100.0
MAX_XP = 9999

# Age stages (ordinal) and the XP needed to reach each
AGE_STAGE_BABY = 0
AGE_STAGE_YOUNG = 1
AGE_STAGE_ADULT = 2
AGE_STAGE_MATURE = 3
# Highest stage first so the first satisfied threshold wins
AGE_STAGE_THRESHOLDS: Final = (
    (AGE_STAGE_MATURE, 120),
    (AGE_STAGE_ADULT, 60),
    (AGE_STAGE_YOUNG, 20),
    (AGE_STAGE_BABY, 0),
)
AGE_STAGE_LABELS: Final = {
    AGE_STAGE_BABY: "Baby",
    AGE_STAGE_YOUNG: "Young",
    AGE_STAGE_ADULT: "Adult",
    AGE_STAGE_MATURE: "Mature",
}
AGE_STAGE_TERMINAL = AGE_STAGE_MATURE

# Moods (derived from stats, never stored)
MOOD_SICK = "sick"
MOOD_SAD = "sad"
MOOD_ENERGETIC = "energetic"
MOOD_HAPPY = "happy"

MOOD_SICK_HEALTH_BELOW = 30
MOOD_SAD_HAPPINESS_BELOW = 30
MOOD_SAD_HUNGER_BELOW = 20
MOOD_ENERGETIC_ABOVE = 70

# ------------------------------------------------------------------------------------------------
# Decay Model
# ------------------------------------------------------------------------------------------------
DECAY_UNIT_SECONDS = 60
DECAY_MAX_UNITS_PER_CALL = 10
DEFAULT_DECAY_MULTIPLIER = 1.0
DEMO_DECAY_MULTIPLIER = 2.0

# Loss per decay unit
DECAY_RATES: Final = {
    STAT_HUNGER: 1.2,
    STAT_ENERGY: 0.9,
    STAT_CLEANLINESS: 0.6,
    STAT_HAPPINESS: 0.4,
}

# Extra happiness loss per unit while a need is unmet
DECAY_LOW_STAT_THRESHOLD = 30
DECAY_HAPPINESS_PENALTIES: Final = {
    STAT_HUNGER: 0.6,
    STAT_ENERGY: 0.5,
    STAT_CLEANLINESS: 0.4,
}

# Health neglect: weighted deficit below the midpoint of each need
DECAY_NEGLECT_MIDPOINT = 50
DECAY_NEGLECT_WEIGHTS: Final = {
    STAT_HUNGER: 0.4,
    STAT_ENERGY: 0.3,
    STAT_CLEANLINESS: 0.2,
    STAT_HAPPINESS: 0.1,
}
DECAY_NEGLECT_HEALTH_FACTOR = 0.03

# Health recovery while core needs are met
DECAY_RECOVERY_THRESHOLD = 60
DECAY_RECOVERY_RATE = 0.20
DECAY_RECOVERY_FACTOR = 0.6

# ------------------------------------------------------------------------------------------------
# Economy
# ------------------------------------------------------------------------------------------------
EXPENSE_CATEGORY_FOOD = "Food"
EXPENSE_CATEGORY_TOYS = "Toys"
EXPENSE_CATEGORY_HEALTH = "Health"
EXPENSE_CATEGORY_SUPPLIES = "Supplies"
EXPENSE_CATEGORY_ACTIVITIES = "Activities"
EXPENSE_CATEGORY_CARE = "Care"
EXPENSE_CATEGORY_OTHER = "Other"

EXPENSE_CATEGORY_OPTIONS: Final = (
    EXPENSE_CATEGORY_FOOD,
    EXPENSE_CATEGORY_TOYS,
    EXPENSE_CATEGORY_HEALTH,
    EXPENSE_CATEGORY_SUPPLIES,
    EXPENSE_CATEGORY_ACTIVITIES,
    EXPENSE_CATEGORY_CARE,
    EXPENSE_CATEGORY_OTHER,
)

# Legacy lowercase expense types → category
EXPENSE_CATEGORY_LEGACY_MAP: Final = {
    "food": EXPENSE_CATEGORY_FOOD,
    "toy": EXPENSE_CATEGORY_TOYS,
    "toys": EXPENSE_CATEGORY_TOYS,
    "healthcare": EXPENSE_CATEGORY_HEALTH,
    "health": EXPENSE_CATEGORY_HEALTH,
    "supplies": EXPENSE_CATEGORY_SUPPLIES,
    "activity": EXPENSE_CATEGORY_ACTIVITIES,
    "activities": EXPENSE_CATEGORY_ACTIVITIES,
    "care": EXPENSE_CATEGORY_CARE,
    "purchase": EXPENSE_CATEGORY_OTHER,
    "other": EXPENSE_CATEGORY_OTHER,
}

# Label keywords used when a legacy record has no usable category
EXPENSE_CATEGORY_KEYWORDS: Final = (
    ("food", EXPENSE_CATEGORY_FOOD),
    ("vet", EXPENSE_CATEGORY_HEALTH),
    ("health", EXPENSE_CATEGORY_HEALTH),
    ("medicine", EXPENSE_CATEGORY_HEALTH),
    ("toy", EXPENSE_CATEGORY_TOYS),
    ("ball", EXPENSE_CATEGORY_TOYS),
    ("supplies", EXPENSE_CATEGORY_SUPPLIES),
    ("cleaning", EXPENSE_CATEGORY_SUPPLIES),
    ("groom", EXPENSE_CATEGORY_SUPPLIES),
    ("activity", EXPENSE_CATEGORY_ACTIVITIES),
    ("spa", EXPENSE_CATEGORY_ACTIVITIES),
    ("park", EXPENSE_CATEGORY_ACTIVITIES),
    ("training", EXPENSE_CATEGORY_ACTIVITIES),
)

INCOME_SOURCE_TASK = "Task"
INCOME_SOURCE_QUEST = "Daily Quest"
INCOME_SOURCE_CHECK_IN = "Daily Check-In"
INCOME_SOURCE_ALLOWANCE = "Weekly Allowance"
INCOME_SOURCE_MINI_GAME = "Mini-Game"
INCOME_SOURCE_BONUS = "Bonus"
INCOME_SOURCE_OTHER = "Other"

INCOME_SOURCE_OPTIONS: Final = (
    INCOME_SOURCE_TASK,
    INCOME_SOURCE_QUEST,
    INCOME_SOURCE_CHECK_IN,
    INCOME_SOURCE_ALLOWANCE,
    INCOME_SOURCE_MINI_GAME,
    INCOME_SOURCE_BONUS,
    INCOME_SOURCE_OTHER,
)

# Legacy/lowercase source names → source
INCOME_SOURCE_LEGACY_MAP: Final = {
    "task": INCOME_SOURCE_TASK,
    "quest": INCOME_SOURCE_QUEST,
    "daily quest": INCOME_SOURCE_QUEST,
    "check-in": INCOME_SOURCE_CHECK_IN,
    "checkin": INCOME_SOURCE_CHECK_IN,
    "daily check-in": INCOME_SOURCE_CHECK_IN,
    "weekly allowance": INCOME_SOURCE_ALLOWANCE,
    "allowance": INCOME_SOURCE_ALLOWANCE,
    "minigame": INCOME_SOURCE_MINI_GAME,
    "mini-game": INCOME_SOURCE_MINI_GAME,
    "bonus": INCOME_SOURCE_BONUS,
    "other": INCOME_SOURCE_OTHER,
}

# ------------------------------------------------------------------------------------------------
# Actions
# ------------------------------------------------------------------------------------------------
ACTION_FEED = "feed"
ACTION_CLEAN = "clean"
ACTION_REST = "rest"
ACTION_PLAY = "play"
ACTION_VET_VISIT = "vet_visit"
ACTION_SPA_DAY = "spa_day"
ACTION_TRAINING_CLASS = "training_class"
ACTION_PARK_TRIP = "park_trip"
ACTION_BUY_ITEM = "buy_item"

ACTION_OPTIONS: Final = (
    ACTION_FEED,
    ACTION_CLEAN,
    ACTION_REST,
    ACTION_PLAY,
    ACTION_VET_VISIT,
    ACTION_SPA_DAY,
    ACTION_TRAINING_CLASS,
    ACTION_PARK_TRIP,
)

DEFAULT_FOOD_ITEM_ID = 1
DEFAULT_HUNGER_RESTORE = 20
DEFAULT_FOOD_HAPPINESS_BONUS = 2
FEED_CLEANLINESS_PENALTY = 2
FEED_XP = 2

# Free care
CLEAN_CLEANLINESS_GAIN = 30
CLEAN_HAPPINESS_GAIN = 2
CLEAN_XP = 1
REST_ENERGY_GAIN = 25
REST_HUNGER_COST = 3
REST_XP = 1

# Vet care
DEFAULT_VET_VISIT_COST = 40
DEFAULT_VET_HEALTH_RESTORE = 15
VET_HAPPINESS_PENALTY = 1
VET_XP = 1

# Paid actions: cost, expense category, label, stat deltas and XP
DATA_ACTION_DEF_COST = "cost"
DATA_ACTION_DEF_CATEGORY = "category"
DATA_ACTION_DEF_LABEL = "label"
DATA_ACTION_DEF_EFFECTS = "effects"
DATA_ACTION_DEF_XP = "xp"
DATA_ACTION_DEF_MESSAGE = "message"

PAID_ACTIONS: Final[dict[str, dict[str, Any]]] = {
    ACTION_PLAY: {
        DATA_ACTION_DEF_COST: 30,
        DATA_ACTION_DEF_CATEGORY: EXPENSE_CATEGORY_TOYS,
        DATA_ACTION_DEF_LABEL: "Play Time",
        DATA_ACTION_DEF_EFFECTS: {
            STAT_HAPPINESS: 25,
            STAT_ENERGY: -10,
            STAT_CLEANLINESS: -5,
        },
        DATA_ACTION_DEF_XP: 0,
        DATA_ACTION_DEF_MESSAGE: "You played with your pet!",
    },
    ACTION_SPA_DAY: {
        DATA_ACTION_DEF_COST: 15,
        DATA_ACTION_DEF_CATEGORY: EXPENSE_CATEGORY_ACTIVITIES,
        DATA_ACTION_DEF_LABEL: "Pet Spa Day",
        DATA_ACTION_DEF_EFFECTS: {
            STAT_HAPPINESS: 30,
            STAT_CLEANLINESS: 25,
            STAT_HEALTH: 5,
        },
        DATA_ACTION_DEF_XP: 2,
        DATA_ACTION_DEF_MESSAGE: "Spa day complete! Your pet feels pampered.",
    },
    ACTION_TRAINING_CLASS: {
        DATA_ACTION_DEF_COST: 10,
        DATA_ACTION_DEF_CATEGORY: EXPENSE_CATEGORY_ACTIVITIES,
        DATA_ACTION_DEF_LABEL: "Training Class",
        DATA_ACTION_DEF_EFFECTS: {STAT_HAPPINESS: 20, STAT_ENERGY: 10},
        DATA_ACTION_DEF_XP: 3,
        DATA_ACTION_DEF_MESSAGE: "Training class completed! Pet learned new tricks.",
    },
    ACTION_PARK_TRIP: {
        DATA_ACTION_DEF_COST: 12,
        DATA_ACTION_DEF_CATEGORY: EXPENSE_CATEGORY_ACTIVITIES,
        DATA_ACTION_DEF_LABEL: "Park Trip",
        DATA_ACTION_DEF_EFFECTS: {STAT_HAPPINESS: 25, STAT_ENERGY: -5, STAT_HEALTH: 3},
        DATA_ACTION_DEF_XP: 2,
        DATA_ACTION_DEF_MESSAGE: "What a fun trip to the park!",
    },
}

# ------------------------------------------------------------------------------------------------
# Store Catalog
# ------------------------------------------------------------------------------------------------
ITEM_CATEGORY_FOOD = "food"
ITEM_CATEGORY_SUPPLIES = "supplies"
ITEM_CATEGORY_HEALTH = "health"
ITEM_CATEGORY_TOYS = "toys"
ITEM_CATEGORY_ACTIVITY = "activity"

ITEM_CATEGORY_EXPENSE_MAP: Final = {
    ITEM_CATEGORY_FOOD: EXPENSE_CATEGORY_FOOD,
    ITEM_CATEGORY_TOYS: EXPENSE_CATEGORY_TOYS,
    ITEM_CATEGORY_HEALTH: EXPENSE_CATEGORY_HEALTH,
    ITEM_CATEGORY_SUPPLIES: EXPENSE_CATEGORY_SUPPLIES,
    ITEM_CATEGORY_ACTIVITY: EXPENSE_CATEGORY_ACTIVITIES,
}

DATA_ITEM_ID = "id"
DATA_ITEM_NAME = "name"
DATA_ITEM_PRICE = "price"
DATA_ITEM_CATEGORY = "category"
DATA_ITEM_HUNGER_RESTORE = "hunger_restore"
DATA_ITEM_HAPPINESS_BONUS = "happiness_bonus"

STORE_ITEMS: Final[tuple[dict[str, Any], ...]] = (
    {
        DATA_ITEM_ID: 1,
        DATA_ITEM_NAME: "Basic Food",
        DATA_ITEM_PRICE: 25,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_FOOD,
        DATA_ITEM_HUNGER_RESTORE: 20,
        DATA_ITEM_HAPPINESS_BONUS: 2,
    },
    {
        DATA_ITEM_ID: 2,
        DATA_ITEM_NAME: "Premium Food",
        DATA_ITEM_PRICE: 50,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_FOOD,
        DATA_ITEM_HUNGER_RESTORE: 35,
        DATA_ITEM_HAPPINESS_BONUS: 8,
    },
    {
        DATA_ITEM_ID: 3,
        DATA_ITEM_NAME: "Cleaning Supplies",
        DATA_ITEM_PRICE: 20,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_SUPPLIES,
    },
    {
        DATA_ITEM_ID: 4,
        DATA_ITEM_NAME: "Grooming Kit",
        DATA_ITEM_PRICE: 35,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_SUPPLIES,
    },
    {
        DATA_ITEM_ID: 5,
        DATA_ITEM_NAME: "Vet Visit",
        DATA_ITEM_PRICE: 100,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_HEALTH,
    },
    {
        DATA_ITEM_ID: 6,
        DATA_ITEM_NAME: "Medicine",
        DATA_ITEM_PRICE: 60,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_HEALTH,
    },
    {
        DATA_ITEM_ID: 7,
        DATA_ITEM_NAME: "Checkup Package",
        DATA_ITEM_PRICE: 80,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_HEALTH,
    },
    {
        DATA_ITEM_ID: 8,
        DATA_ITEM_NAME: "Chew Toy",
        DATA_ITEM_PRICE: 15,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_TOYS,
    },
    {
        DATA_ITEM_ID: 9,
        DATA_ITEM_NAME: "Ball",
        DATA_ITEM_PRICE: 20,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_TOYS,
    },
    {
        DATA_ITEM_ID: 10,
        DATA_ITEM_NAME: "Puzzle Toy",
        DATA_ITEM_PRICE: 30,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_TOYS,
    },
    {
        DATA_ITEM_ID: 11,
        DATA_ITEM_NAME: "Spa Ticket",
        DATA_ITEM_PRICE: 15,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_ACTIVITY,
    },
    {
        DATA_ITEM_ID: 12,
        DATA_ITEM_NAME: "Park Ticket",
        DATA_ITEM_PRICE: 12,
        DATA_ITEM_CATEGORY: ITEM_CATEGORY_ACTIVITY,
    },
)

# Immediate effects of non-food purchases: (category, name keyword) → stat deltas.
# The first matching keyword wins; an empty keyword is the category fallback.
PURCHASE_EFFECTS: Final = (
    (ITEM_CATEGORY_TOYS, "puzzle", {STAT_HAPPINESS: 20}),
    (ITEM_CATEGORY_TOYS, "ball", {STAT_HAPPINESS: 15}),
    (ITEM_CATEGORY_TOYS, "", {STAT_HAPPINESS: 10}),
    (ITEM_CATEGORY_HEALTH, "vet", {STAT_HEALTH: 40}),
    (ITEM_CATEGORY_HEALTH, "medicine", {STAT_HEALTH: 30}),
    (ITEM_CATEGORY_HEALTH, "checkup", {STAT_HEALTH: 25, STAT_HAPPINESS: 5}),
    (ITEM_CATEGORY_SUPPLIES, "grooming", {STAT_CLEANLINESS: 25}),
    (ITEM_CATEGORY_SUPPLIES, "", {STAT_CLEANLINESS: 15}),
    (ITEM_CATEGORY_ACTIVITY, "", {STAT_HAPPINESS: 2}),
)

# ------------------------------------------------------------------------------------------------
# Quests
# ------------------------------------------------------------------------------------------------
QUEST_STATUS_UNCLAIMED = "unclaimed"
QUEST_STATUS_CLAIMABLE = "claimable"
QUEST_STATUS_CLAIMED = "claimed"

# Progress value older saves used to mark a claimed quest
LEGACY_QUEST_CLAIMED_PROGRESS = -1

QUEST_DIFFICULTY_EASY = "easy"
QUEST_DIFFICULTY_MEDIUM = "medium"
QUEST_DIFFICULTY_HARD = "hard"

QUEST_CLEAN_PET = "clean_pet"
QUEST_PLAY_PET = "play_pet"
QUEST_FEED_PET = "feed_pet"
QUEST_HEALTH_CHECK = "health_check"

DEFAULT_DAILY_QUESTS: Final[tuple[dict[str, Any], ...]] = (
    {
        DATA_QUEST_ID: QUEST_CLEAN_PET,
        DATA_QUEST_TITLE: "Keep It Clean",
        DATA_QUEST_DESCRIPTION: "Clean your pet once today.",
        DATA_QUEST_DIFFICULTY: QUEST_DIFFICULTY_EASY,
        DATA_QUEST_GOAL: 1,
        DATA_QUEST_REWARD_COINS: 20,
        DATA_QUEST_REWARD_XP: 1,
    },
    {
        DATA_QUEST_ID: QUEST_PLAY_PET,
        DATA_QUEST_TITLE: "Playtime",
        DATA_QUEST_DESCRIPTION: "Play with your pet twice today.",
        DATA_QUEST_DIFFICULTY: QUEST_DIFFICULTY_MEDIUM,
        DATA_QUEST_GOAL: 2,
        DATA_QUEST_REWARD_COINS: 30,
        DATA_QUEST_REWARD_XP: 2,
    },
    {
        DATA_QUEST_ID: QUEST_FEED_PET,
        DATA_QUEST_TITLE: "Well Fed",
        DATA_QUEST_DESCRIPTION: "Feed your pet three times today.",
        DATA_QUEST_DIFFICULTY: QUEST_DIFFICULTY_MEDIUM,
        DATA_QUEST_GOAL: 3,
        DATA_QUEST_REWARD_COINS: 30,
        DATA_QUEST_REWARD_XP: 3,
    },
    {
        DATA_QUEST_ID: QUEST_HEALTH_CHECK,
        DATA_QUEST_TITLE: "Health Check",
        DATA_QUEST_DESCRIPTION: "Take your pet to the vet.",
        DATA_QUEST_DIFFICULTY: QUEST_DIFFICULTY_HARD,
        DATA_QUEST_GOAL: 1,
        DATA_QUEST_REWARD_COINS: 45,
        DATA_QUEST_REWARD_XP: 5,
    },
)

QUEST_ACTION_MAP: Final = {
    ACTION_FEED: QUEST_FEED_PET,
    ACTION_PLAY: QUEST_PLAY_PET,
    ACTION_CLEAN: QUEST_CLEAN_PET,
    ACTION_VET_VISIT: QUEST_HEALTH_CHECK,
}

# ------------------------------------------------------------------------------------------------
# Badges
# ------------------------------------------------------------------------------------------------
BADGE_CATEGORY_FINANCIAL = "financial"
BADGE_CATEGORY_CARE = "care"
BADGE_CATEGORY_MILESTONE = "milestone"
BADGE_CATEGORY_EVOLUTION = "evolution"

BADGE_FIRST_PURCHASE = "first_purchase"
BADGE_BUDGET_STARTER = "budget_starter"
BADGE_SMART_SHOPPER = "smart_shopper"
BADGE_CLEAN_FREAK = "clean_freak"
BADGE_HEALTHY_PET = "healthy_pet"
BADGE_TASK_MASTER = "task_master"
BADGE_GROWING_UP = "growing_up"

BADGE_BUDGET_STARTER_SPEND = 100
BADGE_SMART_SHOPPER_CATEGORIES = 3
BADGE_CLEAN_FREAK_CLEANLINESS = 95
BADGE_HEALTHY_PET_HEALTH = 90
BADGE_TASK_MASTER_QUESTS = 5

DATA_BADGE_DEF_NAME = "name"
DATA_BADGE_DEF_DESCRIPTION = "description"
DATA_BADGE_DEF_CATEGORY = "category"

BADGE_DEFINITIONS: Final[dict[str, dict[str, str]]] = {
    BADGE_FIRST_PURCHASE: {
        DATA_BADGE_DEF_NAME: "First Purchase",
        DATA_BADGE_DEF_DESCRIPTION: "Spent coins on your pet for the first time.",
        DATA_BADGE_DEF_CATEGORY: BADGE_CATEGORY_FINANCIAL,
    },
    BADGE_BUDGET_STARTER: {
        DATA_BADGE_DEF_NAME: "Budget Starter",
        DATA_BADGE_DEF_DESCRIPTION: "Spent 100 coins caring for your pet.",
        DATA_BADGE_DEF_CATEGORY: BADGE_CATEGORY_FINANCIAL,
    },
    BADGE_SMART_SHOPPER: {
        DATA_BADGE_DEF_NAME: "Smart Shopper",
        DATA_BADGE_DEF_DESCRIPTION: "Bought from 3 different spending categories.",
        DATA_BADGE_DEF_CATEGORY: BADGE_CATEGORY_FINANCIAL,
    },
    BADGE_CLEAN_FREAK: {
        DATA_BADGE_DEF_NAME: "Clean Freak",
        DATA_BADGE_DEF_DESCRIPTION: "Kept your pet's cleanliness at 95 or higher.",
        DATA_BADGE_DEF_CATEGORY: BADGE_CATEGORY_CARE,
    },
    BADGE_HEALTHY_PET: {
        DATA_BADGE_DEF_NAME: "Healthy Pet",
        DATA_BADGE_DEF_DESCRIPTION: "Kept your pet's health at 90 or higher.",
        DATA_BADGE_DEF_CATEGORY: BADGE_CATEGORY_CARE,
    },
    BADGE_TASK_MASTER: {
        DATA_BADGE_DEF_NAME: "Task Master",
        DATA_BADGE_DEF_DESCRIPTION: "Claimed 5 daily quest rewards.",
        DATA_BADGE_DEF_CATEGORY: BADGE_CATEGORY_MILESTONE,
    },
    BADGE_GROWING_UP: {
        DATA_BADGE_DEF_NAME: "Growing Up",
        DATA_BADGE_DEF_DESCRIPTION: "Your pet grew out of the Baby stage.",
        DATA_BADGE_DEF_CATEGORY: BADGE_CATEGORY_EVOLUTION,
    },
}

# ------------------------------------------------------------------------------------------------
# Rewards (allowance, check-in, mini-games, tasks)
# ------------------------------------------------------------------------------------------------
WEEKLY_ALLOWANCE_AMOUNT = 70
ALLOWANCE_COOLDOWN_DAYS = 7

DAILY_CHECK_IN_COINS_MIN = 12
DAILY_CHECK_IN_COINS_MAX = 15
DAILY_CHECK_IN_XP = 1

TASK_CLEAN_ROOM = "clean_room"
TASK_TRAINING = "training"
TASK_PET_WALKING = "pet_walking"
TASK_GROOMING = "grooming"

DATA_TASK_DEF_ID = "id"
DATA_TASK_DEF_NAME = "name"
DATA_TASK_DEF_DESCRIPTION = "description"
DATA_TASK_DEF_COINS = "coins"
DATA_TASK_DEF_XP = "xp"
DATA_TASK_DEF_COOLDOWN_SECONDS = "cooldown_seconds"
DATA_TASK_DEF_EFFECTS = "effects"

TASKS: Final[tuple[dict[str, Any], ...]] = (
    {
        DATA_TASK_DEF_ID: TASK_CLEAN_ROOM,
        DATA_TASK_DEF_NAME: "Clean Room",
        DATA_TASK_DEF_DESCRIPTION: "Tidy up your pet's space",
        DATA_TASK_DEF_COINS: 15,
        DATA_TASK_DEF_XP: 2,
        DATA_TASK_DEF_COOLDOWN_SECONDS: 60,
        DATA_TASK_DEF_EFFECTS: {STAT_CLEANLINESS: 8, STAT_HAPPINESS: 3},
    },
    {
        DATA_TASK_DEF_ID: TASK_TRAINING,
        DATA_TASK_DEF_NAME: "Training Session",
        DATA_TASK_DEF_DESCRIPTION: "Practice tricks and commands",
        DATA_TASK_DEF_COINS: 18,
        DATA_TASK_DEF_XP: 3,
        DATA_TASK_DEF_COOLDOWN_SECONDS: 90,
        DATA_TASK_DEF_EFFECTS: {STAT_HAPPINESS: 5, STAT_ENERGY: -2},
    },
    {
        DATA_TASK_DEF_ID: TASK_PET_WALKING,
        DATA_TASK_DEF_NAME: "Pet Walking",
        DATA_TASK_DEF_DESCRIPTION: "Take your pet for a walk",
        DATA_TASK_DEF_COINS: 20,
        DATA_TASK_DEF_XP: 2,
        DATA_TASK_DEF_COOLDOWN_SECONDS: 120,
        DATA_TASK_DEF_EFFECTS: {STAT_HAPPINESS: 6, STAT_ENERGY: -3, STAT_HEALTH: 2},
    },
    {
        DATA_TASK_DEF_ID: TASK_GROOMING,
        DATA_TASK_DEF_NAME: "Grooming",
        DATA_TASK_DEF_DESCRIPTION: "Brush and groom your pet",
        DATA_TASK_DEF_COINS: 15,
        DATA_TASK_DEF_XP: 2,
        DATA_TASK_DEF_COOLDOWN_SECONDS: 60,
        DATA_TASK_DEF_EFFECTS: {STAT_CLEANLINESS: 10, STAT_HAPPINESS: 4},
    },
)

# ------------------------------------------------------------------------------------------------
# Ledger Retention & Reports
# ------------------------------------------------------------------------------------------------
DEFAULT_MAX_RECORDS = 1000
# Caps tried in order when the repository rejects a write for capacity
RETENTION_TIERS: Final = (DEFAULT_MAX_RECORDS, 500, 100)

RECENT_TRANSACTIONS_LIMIT = 10

TRANSACTION_TYPE_EXPENSE = "expense"
TRANSACTION_TYPE_INCOME = "income"

CSV_EXPENSE_HEADER: Final = ("id", "timestamp", "amount", "category", "label")
CSV_INCOME_HEADER: Final = ("id", "timestamp", "amount", "source", "label")

# ------------------------------------------------------------------------------------------------
# Messages
# ------------------------------------------------------------------------------------------------
MSG_NO_PET = "No pet found. Please create a pet first."
MSG_NO_ACTIVE_SLOT = "No save slot is loaded."
MSG_INVALID_COST_FMT = "Invalid cost: {cost}. Cost must be greater than 0."
MSG_INVALID_AMOUNT_FMT = "Invalid amount: {amount}. Amount must be greater than 0."
MSG_NOT_ENOUGH_COINS_FMT = "Not enough coins! You need {cost} but only have {coins}."
MSG_NOT_ENOUGH_COINS_VET_FMT = (
    "Not enough coins for health care. You need {cost} coins but only have {coins}."
)
MSG_NO_FOOD = "No food available. Please purchase food from the Store first."
MSG_NOT_FOOD_FMT = "{name} is not food."
MSG_UNKNOWN_ITEM_FMT = "Unknown item: {item_id}."
MSG_UNKNOWN_ACTION_FMT = "Unknown action: {action}."
MSG_UNKNOWN_TASK_FMT = "Unknown task: {task_id}."
MSG_FED_FMT = "You fed your pet {name}!"
MSG_CLEANED = "Your pet is squeaky clean!"
MSG_RESTED = "Your pet had a nice rest."
MSG_VET_VISITED = "Your pet visited the vet and feels better."
MSG_PURCHASED_FMT = "Successfully purchased {name}!"
MSG_PURCHASE_LABEL_FMT = "Purchased {name}"
MSG_EARNED_LABEL_FMT = "Earned {amount} coins from {source}"
MSG_QUEST_NOT_READY_FMT = "Quest {quest_id} has no reward to claim."
MSG_QUEST_CLAIMED_FMT = "Quest complete! Earned {coins} coins and {xp} XP."
MSG_QUEST_LABEL_FMT = "Daily quest: {title}"
MSG_ALLOWANCE_NOT_READY_FMT = "Allowance available again in {remaining}."
MSG_ALLOWANCE_CLAIMED_FMT = "Weekly allowance of {amount} coins claimed!"
MSG_CHECK_IN_DONE = "You already checked in today. Come back tomorrow!"
MSG_CHECK_IN_CLAIMED_FMT = "Daily check-in: +{coins} coins and +{xp} XP!"
MSG_TASK_COOLDOWN_FMT = "{name} is on cooldown for {remaining}."
MSG_TASK_COMPLETED_FMT = "Completed task: {name}"
MSG_MINI_GAME_LABEL_FMT = "Mini-game reward: {coins} coins"
MSG_MINI_GAME_APPLIED = "Mini-game reward applied!"
MSG_EVOLUTION_ACK_MISMATCH_FMT = "Evolution event {event_id} is not pending."
MSG_NO_ENTRY_FOUND = "No PetBudget entry found"

# ------------------------------------------------------------------------------------------------
# Dispatcher Signals
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_PET_UPDATED = "pet_updated"
SIGNAL_SUFFIX_EVOLUTION_DETECTED = "evolution_detected"
SIGNAL_SUFFIX_BADGE_EARNED = "badge_earned"
SIGNAL_SUFFIX_LEDGER_RECORDED = "ledger_recorded"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_CREATE_PET = "create_pet"
SERVICE_LOAD_SLOT = "load_slot"
SERVICE_DELETE_SLOT = "delete_slot"
SERVICE_PERFORM_ACTION = "perform_action"
SERVICE_BUY_ITEM = "buy_item"
SERVICE_GIVE_COINS = "give_coins"
SERVICE_ACKNOWLEDGE_EVOLUTION = "acknowledge_evolution"
SERVICE_CLAIM_QUEST = "claim_quest"
SERVICE_CLAIM_ALLOWANCE = "claim_allowance"
SERVICE_CLAIM_DAILY_CHECK_IN = "claim_daily_check_in"
SERVICE_COMPLETE_TASK = "complete_task"

FIELD_SLOT = "slot"
FIELD_PET_NAME = "name"
FIELD_SPECIES = "species"
FIELD_DEMO = "demo"
FIELD_ACTION = "action"
FIELD_ITEM_ID = "item_id"
FIELD_COST = "cost"
FIELD_AMOUNT = "amount"
FIELD_SOURCE = "source"
FIELD_EVENT_ID = "event_id"
FIELD_QUEST_ID = "quest_id"
FIELD_TASK_ID = "task_id"
