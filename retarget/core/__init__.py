# Header view consumed by the calculator
