"""Fixed vocabulary of ingredients users may pick in the survey and plan editor.

The list lives server-side so the client cannot widen it.
"""

INGREDIENTS: tuple[str, ...] = (
    "olive oil",
    "butter",
    "onion",
    "garlic",
    "sugar",
    "egg",
    "milk",
    "flour",
    "tomatoes",
    "vegetable oil",
    "chicken",
    "rice",
    "cheese",
    "lemon",
    "vinegar",
    "soy sauce",
    "bread",
    "potato",
    "carrots",
    "beef",
    "parsley",
    "cheddar cheese",
    "parmesan cheese",
    "mushrooms",
    "bell pepper",
    "green onion",
    "spinach",
    "bacon",
    "mayonnaise",
    "sour cream",
    "yogurt",
    "chicken broth",
    "tomato sauce",
    "tomato paste",
    "cream",
    "lemon juice",
    "lime juice",
    "mustard",
    "ketchup",
    "honey",
    "corn",
    "peas",
    "celery",
    "broccoli",
    "cucumber",
    "avocado",
    "zucchini",
    "shrimp",
    "salmon",
    "tuna",
    "pork",
    "turkey",
    "ham",
    "pasta",
    "spaghetti",
    "noodles",
    "ground beef",
    "chicken breasts",
    "chicken thighs",
    "sausages",
    "tortillas",
    "flour tortillas",
    "corn tortillas",
    "pasta sauce",
    "marinara sauce",
    "pizza sauce",
    "pizza dough",
    "breadcrumbs",
    "cornstarch",
    "oats",
    "yeast",
    "heavy cream",
    "cream cheese",
    "ricotta cheese",
    "swiss cheese",
    "monterey jack cheese",
    "mozzarella cheese",
    "feta cheese",
    "goat cheese",
    "blue cheese",
    "beans",
    "black beans",
    "chickpeas",
    "lentils",
    "kidney beans",
    "pinto beans",
    "white beans",
    "nuts",
    "almonds",
    "walnuts",
    "pecans",
    "peanut butter",
    "sesame seeds",
    "cornmeal",
    "rice vinegar",
    "red wine vinegar",
    "white vinegar",
    "olive oil cooking spray",
    "cooking spray",
    "buttermilk",
    "evaporated milk",
    "sweetened condensed milk",
    "cool whip",
    "whipped cream",
    "ice cream",
    "maple syrup",
    "molasses",
    "brown sugar",
    "powdered sugar",
    "raisins",
    "cranberries",
    "blueberries",
    "strawberries",
    "raspberries",
    "banana",
    "apple",
    "orange",
    "lime",
    "pineapple",
    "coconut",
    "coconut milk",
    "almond milk",
    "oat milk",
    "soy milk",
    "egg whites",
    "egg yolks",
    "lettuce",
    "romaine lettuce",
    "iceberg lettuce",
    "mixed greens",
    "cabbage",
    "cauliflower",
    "green beans",
    "sweet potatoes",
    "eggplant",
    "asparagus",
    "brussels sprouts",
    "leeks",
    "shallot",
    "ginger",
    "jalapeno",
    "green chilies",
    "hot sauce",
    "barbecue sauce",
    "salsa",
    "worcestershire sauce",
    "balsamic vinegar",
    "red wine",
    "white wine",
    "beer",
    "fish",
    "sardines",
    "anchovies",
    "tofu",
    "quinoa",
    "couscous",
    "barley",
    "granola",
    "cereal",
    "gelatin",
    "cake mix",
    "brownie mix",
    "pudding mix",
    "pumpkin puree",
    "pumpkin seeds",
    "sunflower seeds",
    "chia seeds",
    "flax seeds",
    "artichoke hearts",
    "capers",
    "olives",
    "pickles",
    "duck",
    "lamb",
)

_BY_KEY: dict[str, str] = {name.lower(): name for name in INGREDIENTS}


def is_valid_ingredient(name: str) -> bool:
    """Check whether an ingredient is in the vocabulary (case-insensitive)."""
    return name.strip().lower() in _BY_KEY


def validate_ingredients(names: list[str]) -> list[str]:
    """
    Keep only vocabulary ingredients, in their canonical spelling.

    Duplicates are removed; the order of first appearance is kept.
    """
    valid: list[str] = []
    for name in names:
        found = _BY_KEY.get(name.strip().lower())
        if found and found not in valid:
            valid.append(found)
    return valid


def search_ingredients(query: str, limit: int = 10) -> list[str]:
    """Autocomplete: prefix matches first, then other substring matches."""
    needle = query.strip().lower()
    if not needle:
        return list(INGREDIENTS[:limit])

    prefix = [name for name in INGREDIENTS if name.lower().startswith(needle)]
    contains = [name for name in INGREDIENTS if needle in name.lower() and name not in prefix]
    return (prefix + contains)[:limit]
