from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.carts.dtos import AddCartLineDTO
from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.carts.services import CartService
from modules.coupons.constants import DiscountType
from modules.coupons.models import Coupon
from modules.customers.dtos import RegisterCustomerDTO
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService
from modules.items.dtos import CreateItemDTO
from modules.items.inventory import InventoryLedger
from modules.items.models import Item
from modules.items.repositories.django_repository import ItemDjangoRepository
from modules.items.services import ItemService


class Command(BaseCommand):
    help = "Seed database with a small bakery catalog, customers and coupons."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        customers = self._seed_customers(users)
        items = self._seed_items()
        coupons = self._seed_coupons()
        lines = self._seed_cart(customers[0], items)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"customers={len(customers)}, "
                f"items={len(items)}, "
                f"coupons={coupons}, "
                f"cart_lines={lines}"
            )
        )

    def _seed_users(self) -> list:
        User = get_user_model()
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
        users = []
        for username in ("priya", "arjun"):
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(username, password=f"{username}123")
            users.append(user)
        return users

    def _seed_customers(self, users: list) -> list[Customer]:
        self.stdout.write("Creating customers...")
        service = CustomerService(repository=CustomerDjangoRepository())
        seed = [
            ("Priya Sharma", "priya@example.com", "9876543210", "12 MG Road, Bengaluru"),
            ("Arjun Mehta", "arjun@example.com", "9123456780", "48 Park Street, Kolkata"),
        ]
        customers: list[Customer] = []
        for user, (name, email, phone, address) in zip(users, seed):
            customer = Customer.objects.filter(email=email).first()
            if customer is None:
                customer = service.register_customer(
                    RegisterCustomerDTO(
                        name=name, email=email, phone=phone, address=address, user_id=user.pk
                    )
                )
            customers.append(customer)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_items(self) -> list[Item]:
        self.stdout.write("Creating items...")
        service = ItemService(repository=ItemDjangoRepository())
        catalog = [
            CreateItemDTO(
                name="Chocolate Truffle Cake",
                price=Decimal("650.00"),
                regular_stock=10,
                eggless_stock=6,
                has_eggless_option=True,
                featured=True,
                price_per_kg={"1": Decimal("1500"), "1.5": Decimal("2000"), "2": Decimal("2600")},
            ),
            CreateItemDTO(
                name="Butter Croissant",
                price=Decimal("90.00"),
                regular_stock=40,
            ),
            CreateItemDTO(
                name="Blueberry Muffin",
                price=Decimal("120.00"),
                regular_stock=25,
                eggless_stock=15,
                has_eggless_option=True,
            ),
            CreateItemDTO(
                name="Sourdough Loaf",
                price=Decimal("250.00"),
                regular_stock=12,
            ),
        ]
        items: list[Item] = []
        for dto in catalog:
            item = Item.objects.filter(name=dto.name).first()
            if item is None:
                item = service.create_item(dto)
            items.append(item)
        self.stdout.write(self.style.SUCCESS("Creating items... Done!"))
        return items

    def _seed_coupons(self) -> int:
        self.stdout.write("Creating coupons...")
        now = timezone.now()
        seed = [
            ("WELCOME10", DiscountType.PERCENTAGE, Decimal("10"), Decimal("0"), Decimal("100"), 0),
            ("SWEET50", DiscountType.FIXED, Decimal("50"), Decimal("300"), None, 100),
        ]
        created = 0
        for code, discount_type, value, minimum, cap, limit in seed:
            _, was_created = Coupon.objects.get_or_create(
                code=code,
                defaults={
                    "description": f"{code} seed coupon",
                    "discount_type": discount_type,
                    "discount_value": value,
                    "min_order_amount": minimum,
                    "max_discount_amount": cap,
                    "valid_from": now - timedelta(days=1),
                    "valid_until": now + timedelta(days=90),
                    "usage_limit": limit,
                },
            )
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating coupons... Done!"))
        return created

    def _seed_cart(self, customer: Customer, items: list[Item]) -> int:
        item_repo = ItemDjangoRepository()
        service = CartService(
            cart_repository=CartDjangoRepository(),
            item_repository=item_repo,
            ledger=InventoryLedger(item_repo),
        )
        cart = service.get(customer.id)
        if not cart.is_empty:
            return cart.lines.count()

        cake, croissant = items[0], items[1]
        service.add_line(customer.id, AddCartLineDTO(item_id=cake.id, quantity=1, weight=Decimal("1.5")))
        service.add_line(customer.id, AddCartLineDTO(item_id=croissant.id, quantity=4))
        return 2
