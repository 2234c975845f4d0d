# скрипт для создания тестовых файлов

def create_test_files():
    print("Создание тестовых файлов...")

    with open('notes.txt', 'w', encoding='utf-8') as f:
        f.write("Hello, world!\n" * 100)

    # Вторая версия больше 10 KiB, чтобы студия выбрала дельту
    with open('notes_v1.txt', 'w', encoding='utf-8') as f:
        f.write("А давайте запретим кузнечиков с усиками длиннее трёх сантиметров.\n" * 100)

    with open('notes_v2.txt', 'w', encoding='utf-8') as f:
        f.write("А давайте запретим кузнечиков с усиками длиннее трёх сантиметров.\n" * 99)
        f.write("TON выбрал глобальную платежную компанию OpenPayd.\n")

    with open('zeros.bin', 'wb') as f:
        f.write(b'\x00' * (3 * 1024 * 1024 // 2))


if __name__ == '__main__':
    create_test_files()
