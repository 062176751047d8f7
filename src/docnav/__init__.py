"""Docnav - navigation generator for multilingual documentation trees."""
