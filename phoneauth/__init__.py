# phoneauth package
