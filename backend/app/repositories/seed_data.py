"""
Mock catalog and orders loaded into the in-memory repositories at startup.

Stands in for the database: every process restart starts from this data.
"""
from typing import List

from app.domain.product import Product
from app.domain.order import Order

SEED_PRODUCTS = [
    {
        'id': '1',
        'name': 'Cotton Kurti',
        'price': 599,
        'description': 'Beautiful cotton kurti with traditional hand embroidery.',
        'images': ['https://images.pexels.com/photos/4956771/pexels-photo-4956771.jpeg'],
        'category': 'Clothing',
        'tags': ['Women', 'Traditional', 'Summer'],
        'stock': 15,
        'variants': [
            {'id': 'size', 'name': 'Size', 'values': ['S', 'M', 'L', 'XL']},
            {'id': 'color', 'name': 'Color', 'values': ['Red', 'Blue', 'Green']},
        ],
        'created_at': '2023-05-10T10:30:00Z',
        'updated_at': '2023-05-10T10:30:00Z',
    },
    {
        'id': '2',
        'name': 'Handmade Jhumkas',
        'price': 299,
        'description': 'Beautiful handcrafted jhumkas with intricate design.',
        'images': ['https://images.pexels.com/photos/13992207/pexels-photo-13992207.jpeg'],
        'category': 'Jewelry',
        'tags': ['Women', 'Traditional', 'Handmade'],
        'stock': 8,
        'created_at': '2023-05-15T14:20:00Z',
        'updated_at': '2023-05-15T14:20:00Z',
    },
    {
        'id': '3',
        'name': 'Handwoven Saree',
        'price': 1499,
        'description': 'Premium quality handwoven saree with traditional design.',
        'images': ['https://images.pexels.com/photos/12592595/pexels-photo-12592595.jpeg'],
        'category': 'Clothing',
        'tags': ['Women', 'Traditional', 'Premium'],
        'stock': 5,
        'variants': [
            {'id': 'color', 'name': 'Color', 'values': ['Red', 'Blue', 'Green', 'Yellow']},
        ],
        'created_at': '2023-06-01T09:15:00Z',
        'updated_at': '2023-06-01T09:15:00Z',
    },
    {
        'id': '4',
        'name': 'Silver Anklet',
        'price': 399,
        'description': 'Sterling silver anklet with traditional bells.',
        'images': ['https://images.pexels.com/photos/10605196/pexels-photo-10605196.jpeg'],
        'category': 'Jewelry',
        'tags': ['Women', 'Silver', 'Handmade'],
        'stock': 12,
        'created_at': '2023-06-10T11:45:00Z',
        'updated_at': '2023-06-10T11:45:00Z',
    },
]

SEED_ORDERS = [
    {
        'id': 'ORD123456',
        'customer_id': 'CUST1',
        'customer_name': 'Anjali Sharma',
        'customer_phone': '+91 98765 43210',
        'items': [
            {
                'product_id': '3',
                'name': 'Handwoven Saree',
                'image': 'https://images.pexels.com/photos/12592595/pexels-photo-12592595.jpeg',
                'quantity': 1,
                'price': 1499,
                'variant': 'Red',
            },
        ],
        'total_amount': 1499,
        'status': 'confirmed',
        'payment': {
            'status': 'paid',
            'method': 'upi',
            'transaction_id': 'TXN98765432',
            'updated_at': '2023-06-15T09:15:00Z',
        },
        'shipping_address': {
            'name': 'Anjali Sharma',
            'phone': '+91 98765 43210',
            'street': '123 MG Road',
            'city': 'Bangalore',
            'state': 'Karnataka',
            'pincode': '560001',
        },
        'created_at': '2023-06-15T08:30:00Z',
        'updated_at': '2023-06-15T09:15:00Z',
    },
    {
        'id': 'ORD123457',
        'customer_id': 'CUST2',
        'customer_name': 'Rahul Verma',
        'customer_phone': '+91 87654 32109',
        'items': [
            {
                'product_id': '1',
                'name': 'Cotton Kurti',
                'image': 'https://images.pexels.com/photos/4956771/pexels-photo-4956771.jpeg',
                'quantity': 2,
                'price': 599,
                'variant': 'M / Blue',
            },
            {
                'product_id': '2',
                'name': 'Handmade Jhumkas',
                'image': 'https://images.pexels.com/photos/13992207/pexels-photo-13992207.jpeg',
                'quantity': 1,
                'price': 299,
            },
        ],
        'total_amount': 1497,
        'status': 'processing',
        'payment': {
            'status': 'paid',
            'method': 'upi',
            'transaction_id': 'TXN87654321',
            'updated_at': '2023-06-16T14:30:00Z',
        },
        'shipping_address': {
            'name': 'Rahul Verma',
            'phone': '+91 87654 32109',
            'street': '456 Gandhi Road',
            'city': 'Delhi',
            'state': 'Delhi',
            'pincode': '110001',
        },
        'created_at': '2023-06-16T14:20:00Z',
        'updated_at': '2023-06-16T15:10:00Z',
    },
    {
        'id': 'ORD123458',
        'customer_id': 'CUST3',
        'customer_name': 'Priya Patel',
        'customer_phone': '+91 76543 21098',
        'items': [
            {
                'product_id': '4',
                'name': 'Silver Anklet',
                'image': 'https://images.pexels.com/photos/10605196/pexels-photo-10605196.jpeg',
                'quantity': 1,
                'price': 399,
            },
        ],
        'total_amount': 399,
        'status': 'pending',
        'payment': {'status': 'pending', 'method': 'cod'},
        'shipping_address': {
            'name': 'Priya Patel',
            'phone': '+91 76543 21098',
            'street': '789 Nehru Street',
            'city': 'Mumbai',
            'state': 'Maharashtra',
            'pincode': '400001',
        },
        'created_at': '2023-06-17T09:45:00Z',
        'updated_at': '2023-06-17T09:45:00Z',
    },
    {
        'id': 'ORD123459',
        'customer_id': 'CUST4',
        'customer_name': 'Vikram Singh',
        'customer_phone': '+91 65432 10987',
        'items': [
            {
                'product_id': '5',
                'name': 'Handcrafted Lamp',
                'image': 'https://images.pexels.com/photos/5705080/pexels-photo-5705080.jpeg',
                'quantity': 1,
                'price': 899,
            },
            {
                'product_id': '6',
                'name': 'Wooden Coasters (Set of 4)',
                'image': 'https://images.pexels.com/photos/6152103/pexels-photo-6152103.jpeg',
                'quantity': 2,
                'price': 349,
            },
        ],
        'total_amount': 1597,
        'status': 'shipped',
        'payment': {
            'status': 'paid',
            'method': 'card',
            'transaction_id': 'TXN76543210',
            'updated_at': '2023-06-18T10:15:00Z',
        },
        'shipping_address': {
            'name': 'Vikram Singh',
            'phone': '+91 65432 10987',
            'street': '321 Tagore Lane',
            'city': 'Jaipur',
            'state': 'Rajasthan',
            'pincode': '302001',
        },
        'shipping_info': {
            'tracking_id': 'ADTK123456789',
            'carrier': 'AutoDukaan Logistics',
            'tracking_url': 'https://tracking.autodukaan.com/ADTK123456789',
            'tracking_updates': [
                {
                    'status': 'processing',
                    'location': 'Jaipur Sorting Center',
                    'timestamp': '2023-06-19T09:30:00Z',
                    'description': 'Package received at sorting center',
                },
                {
                    'status': 'shipped',
                    'location': 'Jaipur Distribution Center',
                    'timestamp': '2023-06-19T14:20:00Z',
                    'description': 'Package has been shipped',
                },
            ],
        },
        'created_at': '2023-06-18T10:00:00Z',
        'updated_at': '2023-06-19T14:20:00Z',
    },
    {
        'id': 'ORD123460',
        'customer_id': 'CUST5',
        'customer_name': 'Meera Iyer',
        'customer_phone': '+91 54321 09876',
        'items': [
            {
                'product_id': '7',
                'name': 'Silk Scarf',
                'image': 'https://images.pexels.com/photos/6765164/pexels-photo-6765164.jpeg',
                'quantity': 1,
                'price': 599,
                'variant': 'Blue Floral',
            },
        ],
        'total_amount': 599,
        'status': 'delivered',
        'payment': {
            'status': 'paid',
            'method': 'upi',
            'transaction_id': 'TXN65432109',
            'updated_at': '2023-06-14T16:45:00Z',
        },
        'shipping_address': {
            'name': 'Meera Iyer',
            'phone': '+91 54321 09876',
            'street': '567 Bose Road',
            'city': 'Chennai',
            'state': 'Tamil Nadu',
            'pincode': '600001',
        },
        'shipping_info': {
            'tracking_id': 'ADTK987654321',
            'carrier': 'AutoDukaan Logistics',
            'tracking_url': 'https://tracking.autodukaan.com/ADTK987654321',
            'tracking_updates': [
                {
                    'status': 'processing',
                    'location': 'Chennai Sorting Center',
                    'timestamp': '2023-06-14T18:30:00Z',
                    'description': 'Package received at sorting center',
                },
                {
                    'status': 'shipped',
                    'location': 'Chennai Distribution Center',
                    'timestamp': '2023-06-15T09:15:00Z',
                    'description': 'Package has been shipped',
                },
                {
                    'status': 'out_for_delivery',
                    'location': 'Chennai',
                    'timestamp': '2023-06-16T08:30:00Z',
                    'description': 'Package out for delivery',
                },
                {
                    'status': 'delivered',
                    'location': 'Chennai',
                    'timestamp': '2023-06-16T14:20:00Z',
                    'description': 'Package has been delivered',
                },
            ],
        },
        'created_at': '2023-06-14T16:30:00Z',
        'updated_at': '2023-06-16T14:20:00Z',
    },
]


def load_seed_products() -> List[Product]:
    return [Product.model_validate(row) for row in SEED_PRODUCTS]


def load_seed_orders() -> List[Order]:
    return [Order.model_validate(row) for row in SEED_ORDERS]
