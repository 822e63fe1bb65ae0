"""Small SQLite editions of the practice databases for local development and tests."""

from __future__ import annotations

import os
import sqlite3

from . import CLASSIC_MODELS, NORTHWIND, resolve_database_id

_CUSTOMERS = [
    (103, "Atelier graphique", "Schmitt", "Nantes", "France", 21000.00),
    (112, "Signal Gift Stores", "King", "Las Vegas", "USA", 71800.00),
    (114, "Australian Collectors, Co.", "Ferguson", "Melbourne", "Australia", 117300.00),
    (119, "La Rochelle Gifts", "Labrune", "Nantes", "France", 118200.00),
    (121, "Baane Mini Imports", "Bergulfsen", "Stavern", "Norway", 81700.00),
]

_PRODUCTS = [
    ("S10_1678", "1969 Harley Davidson Ultimate Chopper", "Motorcycles", 48.81, 95.70, 7933),
    ("S10_1949", "1952 Alpine Renault 1300", "Classic Cars", 98.58, 214.30, 7305),
    ("S10_2016", "1996 Moto Guzzi 1100i", "Motorcycles", 68.99, 118.94, 6625),
    ("S12_1099", "1968 Ford Mustang", "Classic Cars", 95.34, 194.57, 68),
]

_ORDERS = [
    (10100, "2003-01-06", "Shipped", 103),
    (10101, "2003-01-09", "Shipped", 112),
    (10102, "2003-01-10", "Shipped", 119),
]

_ORDER_DETAILS = [
    (10100, "S10_1678", 30, 81.35),
    (10100, "S10_1949", 50, 205.00),
    (10101, "S10_2016", 25, 108.06),
    (10101, "S12_1099", 26, 170.00),
    (10102, "S10_1678", 39, 95.55),
    (10102, "S10_2016", 41, 110.00),
]

_NW_CUSTOMERS = [
    ("ALFKI", "Alfreds Futterkiste", "Maria Anders", "Berlin", "Germany"),
    ("ANATR", "Ana Trujillo Emparedados y helados", "Ana Trujillo", "México D.F.", "Mexico"),
    ("AROUT", "Around the Horn", "Thomas Hardy", "London", "UK"),
    ("BSBEV", "B's Beverages", "Victoria Ashworth", "London", "UK"),
]

_NW_PRODUCTS = [
    (1, "Chai", 18.00, 39),
    (2, "Chang", 19.00, 17),
    (3, "Aniseed Syrup", 10.00, 13),
]

_NW_ORDERS = [
    (10248, "ALFKI", "1996-07-04"),
    (10249, "AROUT", "1996-07-05"),
    (10250, "AROUT", "1996-07-08"),
]


def create_classicmodels(conn: sqlite3.Connection) -> None:
    """Create and populate the ClassicModels subset."""
    cur = conn.cursor()
    try:
        cur.execute(
            """
            CREATE TABLE customers (
                customerNumber INTEGER PRIMARY KEY,
                customerName VARCHAR(50) NOT NULL,
                contactLastName VARCHAR(50) NOT NULL,
                city VARCHAR(50) NOT NULL,
                country VARCHAR(50) NOT NULL,
                creditLimit DECIMAL(10, 2)
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE products (
                productCode VARCHAR(15) PRIMARY KEY,
                productName VARCHAR(70) NOT NULL,
                productLine VARCHAR(50) NOT NULL,
                buyPrice DECIMAL(10, 2) NOT NULL,
                MSRP DECIMAL(10, 2) NOT NULL,
                quantityInStock INTEGER NOT NULL
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE orders (
                orderNumber INTEGER PRIMARY KEY,
                orderDate TEXT NOT NULL,
                status VARCHAR(15) NOT NULL,
                customerNumber INTEGER NOT NULL REFERENCES customers(customerNumber)
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE orderdetails (
                orderNumber INTEGER NOT NULL REFERENCES orders(orderNumber),
                productCode VARCHAR(15) NOT NULL REFERENCES products(productCode),
                quantityOrdered INTEGER NOT NULL,
                priceEach DECIMAL(10, 2) NOT NULL,
                PRIMARY KEY (orderNumber, productCode)
            );
            """
        )
        cur.executemany(
            """
            INSERT INTO customers
                (customerNumber, customerName, contactLastName, city, country, creditLimit)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            _CUSTOMERS,
        )
        cur.executemany(
            """
            INSERT INTO products
                (productCode, productName, productLine, buyPrice, MSRP, quantityInStock)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            _PRODUCTS,
        )
        cur.executemany(
            "INSERT INTO orders (orderNumber, orderDate, status, customerNumber) VALUES (?, ?, ?, ?)",
            _ORDERS,
        )
        cur.executemany(
            """
            INSERT INTO orderdetails (orderNumber, productCode, quantityOrdered, priceEach)
            VALUES (?, ?, ?, ?)
            """,
            _ORDER_DETAILS,
        )
        conn.commit()
    finally:
        cur.close()


def create_northwind(conn: sqlite3.Connection) -> None:
    """Create and populate the Northwind subset."""
    cur = conn.cursor()
    try:
        cur.execute(
            """
            CREATE TABLE Customers (
                CustomerID CHAR(5) PRIMARY KEY,
                CompanyName VARCHAR(40) NOT NULL,
                ContactName VARCHAR(30),
                City VARCHAR(15),
                Country VARCHAR(15)
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE Products (
                ProductID INTEGER PRIMARY KEY,
                ProductName VARCHAR(40) NOT NULL,
                UnitPrice DECIMAL(10, 4),
                UnitsInStock INTEGER
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE Orders (
                OrderID INTEGER PRIMARY KEY,
                CustomerID CHAR(5) REFERENCES Customers(CustomerID),
                OrderDate TEXT
            );
            """
        )
        cur.executemany(
            "INSERT INTO Customers (CustomerID, CompanyName, ContactName, City, Country) VALUES (?, ?, ?, ?, ?)",
            _NW_CUSTOMERS,
        )
        cur.executemany(
            "INSERT INTO Products (ProductID, ProductName, UnitPrice, UnitsInStock) VALUES (?, ?, ?, ?)",
            _NW_PRODUCTS,
        )
        cur.executemany(
            "INSERT INTO Orders (OrderID, CustomerID, OrderDate) VALUES (?, ?, ?)",
            _NW_ORDERS,
        )
        conn.commit()
    finally:
        cur.close()


def build_sample_database(path: str | os.PathLike[str], database_id: str) -> None:
    """Write a fresh SQLite sample database for ``database_id`` to ``path``."""
    builders = {
        CLASSIC_MODELS: create_classicmodels,
        NORTHWIND: create_northwind,
    }
    if os.path.exists(path):
        os.remove(path)
    conn = sqlite3.connect(path)
    try:
        builders[resolve_database_id(database_id)](conn)
    finally:
        conn.close()
