"""Fixed demo product list, used when analysis is unavailable."""

from .product import Product

# Locations are percentages of a 1920x1080 frame.
SAMPLE_PRODUCTS: list[Product] = [
    Product(
        brand="Jennie-O",
        product_name="93% lean-7% fat fresh-ground turkey",
        timeline=(13.0, 16.0),
        location=(5.2, 18.5, 7.8, 9.3),
        price="Not specified",
        description="The ground turkey is displayed on a countertop and its packaging label is shown, highlighting its nutritional information.",
    ),
    Product(
        brand="Unknown",
        product_name="Whipped Low Fat Cottage Cheese Spreadable",
        timeline=(13.0, 16.0),
        location=(7.8, 20.4, 5.2, 3.7),
        price="Not specified",
        description="The cottage cheese is displayed on a countertop and later its nutrition facts label is focused on in a close-up shot.",
    ),
    Product(
        brand="Unknown",
        product_name="White eggs",
        timeline=(13.0, 16.0),
        location=(10.4, 22.2, 3.1, 3.7),
        price="Not specified",
        description="The eggs are shown nestled within a cardboard carton and later used in the recipe.",
    ),
    Product(
        brand="Unknown",
        product_name="Kale leaves",
        timeline=(13.0, 16.0),
        location=(13.0, 24.1, 3.6, 4.6),
        price="Not specified",
        description="The kale leaves are displayed on a countertop and later added to the skillet with the ground turkey mixture.",
    ),
    Product(
        brand="Unknown",
        product_name="Flat piece of dough",
        timeline=(216.0, 224.0),
        location=(15.6, 25.9, 5.2, 4.6),
        price="Not specified",
        description="The dough is shown resting on parchment paper next to a rolling pin, indicating it is part of the burrito-making process.",
    ),
]
