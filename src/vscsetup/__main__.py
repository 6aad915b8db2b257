from vscsetup import installer

if __name__ == "__main__":
    installer.main()
