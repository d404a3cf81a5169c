# Backend application package
