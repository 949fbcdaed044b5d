"""Domain services: order lifecycle, claims, tables, customers, notifications"""
