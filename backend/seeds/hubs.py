"""Seed definitions for demo laundry hubs.
(Consumed by scripts/seed_demo.py; single source of truth for local data.)
"""

HUBS = [
    {
        'name': 'Central Wash Hub',
        'address': '12 MG Road, Bengaluru',
        'phone': '+91 80 4000 1000',
        'operating_hours': '07:00-22:00',
        'latitude': 12.9756,
        'longitude': 77.6050,
        'services': ['wash_fold', 'dry_cleaning', 'ironing'],
    },
    {
        'name': 'Koramangala Press Point',
        'address': '80 Feet Road, Koramangala, Bengaluru',
        'phone': '+91 80 4000 2000',
        'operating_hours': '08:00-20:00',
        'latitude': 12.9352,
        'longitude': 77.6245,
        'services': ['ironing'],
    },
    {
        'name': 'Indiranagar Dry Cleaners',
        'address': '100 Feet Road, Indiranagar, Bengaluru',
        'phone': '+91 80 4000 3000',
        'operating_hours': '09:00-21:00',
        'latitude': 12.9719,
        'longitude': 77.6412,
        'services': ['dry_cleaning', 'wash_fold'],
    },
]
