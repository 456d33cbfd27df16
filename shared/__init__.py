"""
Shared Kernel

Building blocks shared by the room calendar and reservation contexts:
base entity/aggregate classes, value objects (money, stay ranges), the
domain error taxonomy and the transactional unit of work.
"""
