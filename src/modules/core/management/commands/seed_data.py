from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.orders.dtos import CreateOrderDTO, OrderOutputDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

CAFE_MENU = [
    ("Espresso", "Strong Italian coffee", Decimal("2.50"), 100),
    ("Cappuccino", "Espresso with steamed milk foam", Decimal("3.50"), 100),
    ("Latte", "Espresso with steamed milk", Decimal("4.00"), 100),
    ("Americano", "Espresso with hot water", Decimal("2.75"), 100),
    ("Croissant", "Buttery French pastry", Decimal("3.00"), 50),
    ("Muffin", "Blueberry muffin", Decimal("2.50"), 40),
]


class Command(BaseCommand):
    help = "Seed the database with the café menu."

    def add_arguments(self, parser):
        parser.add_argument(
            "--sample-order",
            action="store_true",
            help="Also place one sample order through the order service.",
        )

    def handle(self, *args, **options):
        self.stdout.write("Seeding café menu...")
        products = self._seed_products()

        orders_created = 0
        if options["sample_order"]:
            self._place_sample_order(products)
            orders_created = 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={len(products)}, orders={orders_created}"
            )
        )

    def _seed_products(self) -> list[Product]:
        products: list[Product] = []
        for name, description, price, stock in CAFE_MENU:
            product, created = Product.objects.get_or_create(
                name=name,
                defaults={
                    "description": description,
                    "price": price,
                    "stock_quantity": stock,
                },
            )
            if created:
                self.stdout.write(f"  + {name}")
            products.append(product)
        return products

    def _place_sample_order(self, products: list[Product]) -> None:
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        by_name = {product.name: product for product in products}
        dto = CreateOrderDTO.from_payload(
            "Sample Customer",
            [
                {"product_id": by_name["Espresso"].id, "quantity": 2},
                {"product_id": by_name["Croissant"].id, "quantity": 1},
            ],
        )
        order = service.create_order(dto)
        self.stdout.write(OrderOutputDTO.from_entity(order).model_dump_json(indent=2))
