"""Describes the print-order domain. Centres around the `OrderWizard`.

What is there to it?

- A book is configured in five linear steps: cover, paper, finish,
  shipping, then review and pay.
- Each step has to be complete before moving on. Going back never loses
  anything.
- The price is derived from the catalog. There is no base price, only the
  cover and paper add-ons.
- Orders themselves live behind the backend api. We only create them and
  follow the checkout url we get back.
"""
