"""
                Campus Cafeteria Ordering System

Backend for a campus cafeteria: menu browsing, role-based order
pricing, kitchen status transitions and real-time order events.

Author: Khalil Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil Bannouri"
