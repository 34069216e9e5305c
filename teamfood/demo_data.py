from .models import Role

DEMO_COUNTRIES = [
    {"name": "India", "code": "IN"},
    {"name": "America", "code": "US"},
]

DEMO_USERS = [
    {"name": "Nick Fury", "email": "nick.fury@shield.com", "role": Role.ADMIN, "country": "US"},
    {"name": "Captain Marvel", "email": "captain.marvel@shield.com", "role": Role.MANAGER, "country": "IN"},
    {"name": "Captain America", "email": "captain.america@shield.com", "role": Role.MANAGER, "country": "US"},
    {"name": "Thanos", "email": "thanos@shield.com", "role": Role.MEMBER, "country": "IN"},
    {"name": "Thor", "email": "thor@shield.com", "role": Role.MEMBER, "country": "IN"},
    {"name": "Travis", "email": "travis@shield.com", "role": Role.MEMBER, "country": "US"},
]

DEMO_PAYMENT_METHODS = [
    {"email": "nick.fury@shield.com", "type": "CREDIT_CARD", "last_four": "4242", "is_default": True},
    {"email": "captain.marvel@shield.com", "type": "UPI", "last_four": "9876", "is_default": True},
    {"email": "captain.america@shield.com", "type": "DEBIT_CARD", "last_four": "1234", "is_default": True},
]


def _item(name, description, price, category, is_vegetarian):
    return {
        "name": name,
        "description": description,
        "price": price,
        "category": category,
        "is_vegetarian": is_vegetarian,
    }


DEMO_RESTAURANTS = [
    {
        "name": "Spice Garden",
        "description": "Authentic North Indian cuisine with a modern twist. Famous for our butter chicken and naan.",
        "image": "https://images.unsplash.com/photo-1585937421612-70a008356fbe?w=800",
        "cuisine": "North Indian",
        "rating": 4.5,
        "country": "IN",
        "menu_items": [
            _item("Butter Chicken", "Tender chicken in creamy tomato-based curry", 350, "Main Course", False),
            _item("Paneer Tikka Masala", "Grilled cottage cheese in spiced gravy", 280, "Main Course", True),
            _item("Garlic Naan", "Fresh baked bread with garlic butter", 60, "Breads", True),
            _item("Dal Makhani", "Slow-cooked black lentils in creamy sauce", 220, "Main Course", True),
        ],
    },
    {
        "name": "Dosa Plaza",
        "description": "South Indian delicacies - crispy dosas, fluffy idlis, and aromatic sambhar.",
        "image": "https://images.unsplash.com/photo-1630383249896-424e482df921?w=800",
        "cuisine": "South Indian",
        "rating": 4.3,
        "country": "IN",
        "menu_items": [
            _item("Masala Dosa", "Crispy crepe with spiced potato filling", 120, "Dosas", True),
            _item("Idli Sambhar", "Steamed rice cakes with lentil soup", 80, "Breakfast", True),
            _item("Mysore Bonda", "Crispy lentil fritters", 60, "Snacks", True),
            _item("Filter Coffee", "Traditional South Indian coffee", 40, "Beverages", True),
        ],
    },
    {
        "name": "Biryani House",
        "description": "Royal Hyderabadi biryani cooked in traditional dum style with finest spices.",
        "image": "https://images.unsplash.com/photo-1563379091339-03b21ab4a4f8?w=800",
        "cuisine": "Hyderabadi",
        "rating": 4.7,
        "country": "IN",
        "menu_items": [
            _item("Chicken Dum Biryani", "Aromatic rice with tender chicken and spices", 320, "Biryani", False),
            _item("Mutton Biryani", "Slow-cooked lamb with basmati rice", 380, "Biryani", False),
            _item("Veg Biryani", "Mixed vegetables with fragrant rice", 240, "Biryani", True),
            _item("Mirchi Ka Salan", "Spicy green chili curry", 120, "Sides", True),
        ],
    },
    {
        "name": "Burger Barn",
        "description": "Classic American burgers made with 100% Angus beef and fresh ingredients.",
        "image": "https://images.unsplash.com/photo-1568901346375-23c9450c58cd?w=800",
        "cuisine": "American",
        "rating": 4.4,
        "country": "US",
        "menu_items": [
            _item("Classic Cheeseburger", "Angus beef patty with cheddar cheese", 12.99, "Burgers", False),
            _item("Bacon BBQ Burger", "Beef patty with crispy bacon and BBQ sauce", 14.99, "Burgers", False),
            _item("Veggie Burger", "Plant-based patty with fresh toppings", 11.99, "Burgers", True),
            _item("Loaded Fries", "Crispy fries with cheese and bacon bits", 6.99, "Sides", False),
        ],
    },
    {
        "name": "Pizza Palace",
        "description": "New York style pizzas with hand-tossed dough and premium toppings.",
        "image": "https://images.unsplash.com/photo-1574071318508-1cdbab80d002?w=800",
        "cuisine": "Italian-American",
        "rating": 4.6,
        "country": "US",
        "menu_items": [
            _item("Pepperoni Supreme", "Classic pepperoni with mozzarella", 18.99, "Pizza", False),
            _item("Margherita", "Fresh tomatoes, basil, and mozzarella", 15.99, "Pizza", True),
            _item("BBQ Chicken Pizza", "Grilled chicken with tangy BBQ sauce", 19.99, "Pizza", False),
            _item("Garlic Knots", "Buttery garlic bread knots", 5.99, "Sides", True),
        ],
    },
    {
        "name": "Steak Station",
        "description": "Premium steakhouse featuring USDA Prime cuts and classic American sides.",
        "image": "https://images.unsplash.com/photo-1600891964092-4316c288032e?w=800",
        "cuisine": "Steakhouse",
        "rating": 4.8,
        "country": "US",
        "menu_items": [
            _item("Ribeye Steak", "16oz USDA Prime ribeye, grilled to perfection", 45.99, "Steaks", False),
            _item("Filet Mignon", "8oz tender filet with herb butter", 52.99, "Steaks", False),
            _item("Caesar Salad", "Romaine lettuce with classic Caesar dressing", 12.99, "Salads", True),
            _item("Loaded Baked Potato", "Baked potato with sour cream and chives", 8.99, "Sides", True),
        ],
    },
]
