"""
All the structures and functions to manipulate the objects' fields.

All the functions are purely data-manipulative and computational.
No external calls or any i/o activities are done here.
"""
